from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from leolatency.core.latency import LatencySample
from leolatency.utils.constants import DEFAULT_PERCENTILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsSnapshot:
    mean: float       # ms
    median: float     # ms
    p95: float        # ms
    count: int        # number of samples aggregated

    @classmethod
    def empty(cls) -> StatsSnapshot:
        return cls(mean=0.0, median=0.0, p95=0.0, count=0)

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def aggregate(values: Iterable[float], percentile: float = DEFAULT_PERCENTILE) -> StatsSnapshot:
    """
    Summarize latency values for a single tick.

    The tail value uses linear interpolation between closest ranks on the
    sorted values, at position (n - 1) * percentile (numpy's default
    "linear" quantile method).

    Args:
        values: Latency values in ms (possibly empty)
        percentile: Tail quantile in [0, 1]

    Returns:
        StatsSnapshot; all zeros when values is empty
    """
    if not 0.0 <= percentile <= 1.0:
        raise ValueError(f"percentile must be within [0, 1], got {percentile}")

    ordered = np.sort(np.asarray(list(values), dtype=np.float64))
    if ordered.size == 0:
        return StatsSnapshot.empty()

    return StatsSnapshot(
        mean=float(np.mean(ordered)),
        median=float(np.median(ordered)),
        p95=float(np.quantile(ordered, percentile)),
        count=int(ordered.size),
    )


def aggregate_samples(samples: Iterable[LatencySample], percentile: float = DEFAULT_PERCENTILE) -> StatsSnapshot:
    """Aggregate the covered samples of a tick; no-coverage samples are excluded."""
    values = [s.latency_ms for s in samples if s.latency_ms is not None]
    stats = aggregate(values, percentile)
    if stats.is_empty:
        logger.debug("No covered ground nodes this tick, publishing empty stats")
    return stats
