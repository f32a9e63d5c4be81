"""Nearest-satellite latency estimation for ground nodes.

Every ground node is matched against every satellite (brute force, O(N*M)).
For a few dozen nodes and satellites this is cheaper than building a
spatial index each tick.
"""
from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from leolatency.core.projection import GeoPosition
from leolatency.utils.constants import EARTH_RADIUS_KM, SIGNAL_SPEED_KM_S

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroundNode:
    """A fixed ground observer.

    Attributes:
        node_id: Stable identifier.
        position: Geographic location.
    """

    node_id: int
    position: GeoPosition


@dataclass(frozen=True)
class LatencySample:
    """Latency estimate for one ground node at one tick.

    Attributes:
        node_id: Identifier of the ground node.
        latency_ms: Estimated latency in ms, ``None`` when no satellite is
            available (no coverage).
        distance_km: Surface distance to the nearest satellite in km.
        satellite_index: Index of the nearest satellite in the tick's
            position list.
    """

    node_id: int
    latency_ms: float | None
    distance_km: float | None = None
    satellite_index: int | None = None

    @property
    def covered(self) -> bool:
        return self.latency_ms is not None


def haversine_km(a: GeoPosition, b: GeoPosition, radius_km: float = EARTH_RADIUS_KM) -> float:
    """Great-circle distance between two geographic positions in km."""
    lat1, lat2 = math.radians(a.lat_deg), math.radians(b.lat_deg)
    d_lat = math.radians(b.lat_deg - a.lat_deg)
    d_lon = math.radians(b.lon_deg - a.lon_deg)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * radius_km * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _haversine_many(
    origin: GeoPosition,
    lats_deg: NDArray[np.float64],
    lons_deg: NDArray[np.float64],
    radius_km: float = EARTH_RADIUS_KM,
) -> NDArray[np.float64]:
    """Vectorized haversine from one origin to many positions."""
    lat1 = math.radians(origin.lat_deg)
    lat2 = np.radians(lats_deg)
    d_lat = np.radians(lats_deg - origin.lat_deg)
    d_lon = np.radians(lons_deg - origin.lon_deg)
    h = np.sin(d_lat / 2) ** 2 + math.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2) ** 2
    # Rounding can push h a hair outside [0, 1].
    h = np.clip(h, 0.0, 1.0)
    return 2 * radius_km * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def distance_to_latency_ms(distance_km: float, signal_speed_km_s: float = SIGNAL_SPEED_KM_S) -> float:
    """Convert a surface distance to a one-way latency estimate in ms.

    Altitude and slant range are ignored on purpose: the estimate is a
    surface-distance proxy, not a physical round-trip time.
    """
    return (distance_km / signal_speed_km_s) * 1000.0


def nearest_sample(
    node: GroundNode,
    lats_deg: NDArray[np.float64],
    lons_deg: NDArray[np.float64],
) -> LatencySample:
    """Latency sample for one node against the satellite coordinate arrays."""
    if lats_deg.size == 0:
        return LatencySample(node_id=node.node_id, latency_ms=None)

    distances = _haversine_many(node.position, lats_deg, lons_deg)
    idx = int(np.argmin(distances))
    d_min = float(distances[idx])
    return LatencySample(
        node_id=node.node_id,
        latency_ms=distance_to_latency_ms(d_min),
        distance_km=d_min,
        satellite_index=idx,
    )


def compute_latencies(
    satellites: Sequence[GeoPosition],
    ground_nodes: Sequence[GroundNode],
    workers: int | None = None,
) -> list[LatencySample]:
    """Compute one latency sample per ground node.

    Args:
        satellites: Satellite positions for the current tick (may be empty).
        ground_nodes: Fixed ground nodes.
        workers: If greater than 1, spread the nodes over a thread pool of
            this size. Results keep ground-node order either way.

    Returns:
        Exactly ``len(ground_nodes)`` samples, in ground-node order. With
        no satellites every sample reports no coverage.
    """
    lats = np.array([s.lat_deg for s in satellites], dtype=np.float64)
    lons = np.array([s.lon_deg for s in satellites], dtype=np.float64)

    if not satellites:
        logger.debug("No satellite positions: %d ground nodes without coverage", len(ground_nodes))

    if workers is not None and workers > 1 and len(ground_nodes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            samples = list(pool.map(lambda node: nearest_sample(node, lats, lons), ground_nodes))
    else:
        samples = [nearest_sample(node, lats, lons) for node in ground_nodes]

    logger.debug(
        "Computed %d latency samples against %d satellites",
        len(samples), len(satellites),
    )
    return samples
