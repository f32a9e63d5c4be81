"""Random placement of ground nodes."""
from __future__ import annotations

import logging

import numpy as np

from leolatency.core.latency import GroundNode
from leolatency.core.projection import GeoPosition
from leolatency.utils.constants import DEFAULT_GROUND_MAX_ABS_LAT_DEG, DEFAULT_GROUND_NODE_COUNT

logger = logging.getLogger(__name__)


def random_ground_nodes(
    count: int = DEFAULT_GROUND_NODE_COUNT,
    *,
    max_abs_lat_deg: float = DEFAULT_GROUND_MAX_ABS_LAT_DEG,
    seed: int | None = None,
) -> list[GroundNode]:
    """Place ground nodes uniformly in latitude/longitude.

    Latitude is drawn from [-max_abs_lat_deg, max_abs_lat_deg] and longitude
    from [-180, 180). Node identifiers are 0..count-1.

    Args:
        count: Number of nodes.
        max_abs_lat_deg: Half-width of the latitude band in degrees.
        seed: Seed for a reproducible placement. ``None`` draws fresh
            entropy on every call.

    Returns:
        List of GroundNode objects.

    Raises:
        ValueError: If count is negative or the latitude band is invalid.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if not 0.0 <= max_abs_lat_deg <= 90.0:
        raise ValueError(f"max_abs_lat_deg must be within [0, 90], got {max_abs_lat_deg}")

    rng = np.random.default_rng(seed)
    lats = rng.uniform(-max_abs_lat_deg, max_abs_lat_deg, size=count)
    lons = rng.uniform(-180.0, 180.0, size=count)

    nodes = [
        GroundNode(node_id=i, position=GeoPosition(float(lat), float(lon)))
        for i, (lat, lon) in enumerate(zip(lats, lons))
    ]
    logger.debug("Placed %d ground nodes within +/-%.1f deg latitude", count, max_abs_lat_deg)
    return nodes
