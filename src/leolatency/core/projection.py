"""Projection of inertial positions onto geographic coordinates.

Uses a spherical Earth: latitude is the geocentric angle above the
equatorial plane and longitude is the inertial right ascension rotated by
Greenwich Mean Sidereal Time.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from sgp4.propagation import gstime

from leolatency.core.propagation import InertialPosition, julian_date


@dataclass(frozen=True)
class GeoPosition:
    """Geographic coordinates in degrees.

    Attributes:
        lat_deg: Latitude in [-90, 90].
        lon_deg: Longitude in [-180, 180].
    """

    lat_deg: float
    lon_deg: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat_deg <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat_deg}")
        if not -180.0 <= self.lon_deg <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lon_deg}")


def gmst(instant: datetime) -> float:
    """Greenwich Mean Sidereal Time in radians for a UTC instant."""
    jd, fr = julian_date(instant)
    return gstime(jd + fr)


def normalize_longitude(lon_deg: float) -> float:
    """Wrap a longitude in degrees into (-180, 180]."""
    lon = ((lon_deg + 540.0) % 360.0) - 180.0
    return 180.0 if lon <= -180.0 else lon


def project(position: InertialPosition, instant: datetime | None = None) -> GeoPosition:
    """Convert an inertial position into a geographic position.

    Args:
        position: TEME position in km.
        instant: Instant used for the Earth rotation correction. Defaults
            to ``position.epoch``.

    Returns:
        The ground-projected GeoPosition.
    """
    if instant is None:
        instant = position.epoch

    x, y, z = position.x_km, position.y_km, position.z_km
    r = math.sqrt(x * x + y * y)
    lon = math.atan2(y, x) - gmst(instant)
    lat = math.atan2(z, r)

    return GeoPosition(
        lat_deg=math.degrees(lat),
        lon_deg=normalize_longitude(math.degrees(lon)),
    )
