"""
leolatency: LEO constellation latency simulator for Python.

Estimates the latency between ground observers and their nearest
low-earth-orbit satellite, re-evaluated on a fixed cadence from live
two-line element sets.
"""

from __future__ import annotations

__version__ = "0.1.0.dev0"

from leolatency.core.elements import ElementSet, parse_elements
from leolatency.core.propagation import (
    propagate,
    propagate_batch,
    present_positions,
    InertialPosition,
    PropagationResult,
)
from leolatency.core.projection import GeoPosition, gmst, project
from leolatency.core.latency import GroundNode, LatencySample, compute_latencies, haversine_km
from leolatency.core.stats import StatsSnapshot, aggregate, aggregate_samples
from leolatency.core.simulation import LatencySimulation, Snapshot, format_status
from leolatency.data.celestrak import CelestrakClient
from leolatency.data.ground import random_ground_nodes

__all__ = [
    "__version__",
    "ElementSet",
    "parse_elements",
    "propagate",
    "propagate_batch",
    "present_positions",
    "InertialPosition",
    "PropagationResult",
    "GeoPosition",
    "gmst",
    "project",
    "GroundNode",
    "LatencySample",
    "compute_latencies",
    "haversine_km",
    "StatsSnapshot",
    "aggregate",
    "aggregate_samples",
    "LatencySimulation",
    "Snapshot",
    "format_status",
    "CelestrakClient",
    "random_ground_nodes",
]
