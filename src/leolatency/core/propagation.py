"""Orbital propagation via SGP4."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone

import numpy as np

logger = logging.getLogger(__name__)
from numpy.typing import NDArray
from sgp4.api import SatrecArray, jday
from leolatency.core.elements import ElementSet


@dataclass(frozen=True)
class InertialPosition:
    """Position in the TEME inertial frame.

    Attributes:
        x_km: X component in km.
        y_km: Y component in km.
        z_km: Z component in km.
        epoch: Instant at which the position is valid.
    """

    x_km: float
    y_km: float
    z_km: float
    epoch: datetime

    def as_array(self) -> NDArray[np.float64]:
        return np.array([self.x_km, self.y_km, self.z_km], dtype=np.float64)

    @property
    def finite(self) -> bool:
        return all(math.isfinite(c) for c in (self.x_km, self.y_km, self.z_km))


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of propagating one element set: a position, or its absence.

    Attributes:
        name: Label of the propagated element set.
        position: Inertial position, ``None`` when propagation failed.
        error_code: SGP4 error code (0 on success, -1 for non-SGP4 failures).
    """

    name: str
    position: InertialPosition | None
    error_code: int = 0

    @property
    def present(self) -> bool:
        return self.position is not None


def as_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime (naive values are taken as UTC)."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def julian_date(instant: datetime) -> tuple[float, float]:
    """Split Julian date (whole, fraction) for a datetime."""
    t = as_utc(instant)
    return jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)


def _position(pos, instant: datetime) -> InertialPosition | None:
    if not all(math.isfinite(c) for c in pos):
        return None
    return InertialPosition(float(pos[0]), float(pos[1]), float(pos[2]), instant)


def propagate(element_set: ElementSet, instant: datetime) -> InertialPosition | None:
    """Propagate a single element set to one instant using SGP4.

    Args:
        element_set: A parsed ElementSet.
        instant: UTC datetime to propagate to.

    Returns:
        The inertial position, or ``None`` if SGP4 reports an error
        (e.g. a decayed orbit).
    """
    jd, fr = julian_date(instant)
    error_code, pos, _vel = element_set.satrec.sgp4(jd, fr)

    if error_code != 0:
        logger.warning(
            "SGP4 propagation failed for NORAD %d at %s: error code %d",
            element_set.norad_id, instant, error_code,
        )
        return None

    position = _position(pos, instant)
    if position is None:
        logger.warning("SGP4 returned a non-finite position for NORAD %d at %s", element_set.norad_id, instant)
    return position


def propagate_batch(element_sets: list[ElementSet], instant: datetime) -> list[PropagationResult]:
    """Propagate many element sets to a single instant using vectorized SGP4.

    Uses SatrecArray for C-level batch propagation.

    Args:
        element_sets: Element sets to propagate.
        instant: Single UTC datetime to propagate all objects to.

    Returns:
        One PropagationResult per element set, in input order. Failed
        entries carry ``position=None`` and the SGP4 error code.
    """
    if not element_sets:
        return []

    satrec_array = SatrecArray([es.satrec for es in element_sets])

    jd, fr = julian_date(instant)
    jd_array = np.array([jd], dtype=np.float64)
    fr_array = np.array([fr], dtype=np.float64)

    # Output shape: errors (n,1), positions (n,1,3), velocities (n,1,3)
    errors, positions, _velocities = satrec_array.sgp4(jd_array, fr_array)

    results = []
    for i, es in enumerate(element_sets):
        error_code = int(errors[i, 0])
        position = _position(positions[i, 0, :], instant) if error_code == 0 else None
        if position is None:
            logger.warning(
                "SGP4 propagation failed for NORAD %d at %s: error code %d",
                es.norad_id, instant, error_code,
            )
        results.append(PropagationResult(name=es.label, position=position, error_code=error_code))

    logger.debug(
        "Propagated %d element sets (%d present)",
        len(results), sum(1 for r in results if r.present),
    )
    return results


def present_positions(results: list[PropagationResult]) -> list[InertialPosition]:
    """Keep the positions of successful propagations, dropping absent ones."""
    return [r.position for r in results if r.position is not None]
