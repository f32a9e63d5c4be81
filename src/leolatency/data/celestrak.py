"""CelesTrak catalog client.

Fetches current element sets for a satellite group from CelesTrak's public
GP endpoint. No account is required.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

logger = logging.getLogger(__name__)

from leolatency.core.elements import ElementSet, parse_elements
from leolatency.utils.constants import (
    CELESTRAK_GP_URL,
    DEFAULT_CELESTRAK_GROUP,
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_SATELLITE_LIMIT,
)


@dataclass
class CelestrakClient:
    """Client for the CelesTrak GP element-set API.

    Attributes:
        base_url: GP endpoint URL.
        timeout_s: Request timeout in seconds.
    """

    base_url: str = CELESTRAK_GP_URL
    timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    def _request(self, params: dict[str, str]) -> str:
        """Make a GET request to the GP endpoint.

        Args:
            params: Query parameters.

        Returns:
            Response text.

        Raises:
            requests.HTTPError: If the request fails.
        """
        response = self._session.get(self.base_url, params=params, timeout=self.timeout_s)
        if response.status_code != 200:
            logger.error("CelesTrak request failed with status %d", response.status_code)
        response.raise_for_status()
        return response.text

    def fetch_group(
        self,
        group: str = DEFAULT_CELESTRAK_GROUP,
        *,
        limit: int | None = DEFAULT_SATELLITE_LIMIT,
    ) -> list[ElementSet]:
        """Fetch element sets for a satellite group.

        Malformed records in the response are skipped.

        Args:
            group: CelesTrak group name (e.g. "starlink").
            limit: Keep at most this many element sets; ``None`` keeps all.

        Returns:
            List of ElementSet objects, in catalog order.

        Raises:
            requests.HTTPError: If the request fails.
        """
        response_text = self._request({"GROUP": group, "FORMAT": "tle"})

        if not response_text.strip():
            logger.warning("CelesTrak returned no element sets for group %r", group)
            return []

        element_sets = parse_elements(response_text, limit=limit)
        logger.info("Fetched %d element sets for group %r", len(element_sets), group)
        return element_sets

    def fetch_catnr(self, norad_id: int) -> ElementSet:
        """Fetch the current element set for a NORAD catalog number.

        Args:
            norad_id: NORAD catalog number.

        Returns:
            The current element set for the object.

        Raises:
            ValueError: If no element set is found for the given NORAD ID.
            requests.HTTPError: If the request fails.
        """
        response_text = self._request({"CATNR": str(norad_id), "FORMAT": "tle"})

        element_sets = parse_elements(response_text, limit=1) if response_text.strip() else []
        if not element_sets:
            logger.error("No element set found for NORAD ID %d", norad_id)
            raise ValueError(f"No element set found for NORAD ID {norad_id}")

        return element_sets[0]
