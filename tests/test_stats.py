from __future__ import annotations

import math

import numpy as np
import pytest

from leolatency.core.latency import LatencySample
from leolatency.core.stats import StatsSnapshot, aggregate, aggregate_samples


class TestAggregate:
    def test_even_count(self):
        stats = aggregate([4.0, 1.0, 3.0, 2.0])
        assert stats.mean == pytest.approx(2.5)
        assert stats.median == pytest.approx(2.5)
        # position (4 - 1) * 0.95 = 2.85 -> 3 + 0.85 * (4 - 3)
        assert stats.p95 == pytest.approx(3.85)
        assert stats.count == 4

    def test_odd_count(self):
        stats = aggregate([5.0, 1.0, 3.0])
        assert stats.median == 3.0
        assert stats.mean == pytest.approx(3.0)
        assert stats.p95 == pytest.approx(4.8)

    def test_single_value(self):
        stats = aggregate([12.5])
        assert stats == StatsSnapshot(mean=12.5, median=12.5, p95=12.5, count=1)

    def test_twenty_values(self):
        values = [float(v) for v in range(1, 21)]
        stats = aggregate(values)
        # position 19 * 0.95 = 18.05 -> 19 + 0.05 * (20 - 19)
        assert stats.p95 == pytest.approx(19.05)
        assert stats.median == pytest.approx(10.5)

    def test_accepts_generator(self):
        stats = aggregate(v for v in (1.0, 2.0, 3.0))
        assert stats.count == 3

    def test_empty_is_zero_snapshot(self):
        stats = aggregate([])
        assert stats == StatsSnapshot.empty()
        assert stats.is_empty
        for value in (stats.mean, stats.median, stats.p95):
            assert value == 0.0
            assert not math.isnan(value)

    def test_custom_percentile(self):
        stats = aggregate([1.0, 2.0, 3.0, 4.0, 5.0], percentile=0.5)
        assert stats.p95 == pytest.approx(3.0)

    @pytest.mark.parametrize("percentile", [-0.1, 1.5])
    def test_invalid_percentile_raises(self, percentile):
        with pytest.raises(ValueError, match="percentile"):
            aggregate([1.0], percentile=percentile)

    def test_ordering_properties(self):
        rng = np.random.default_rng(42)
        for n in range(1, 60):
            values = rng.uniform(0.0, 60.0, size=n).tolist()
            stats = aggregate(values)
            lo, hi = min(values), max(values)
            assert lo <= stats.median <= hi
            assert lo - 1e-9 <= stats.mean <= hi + 1e-9
            assert stats.median <= stats.p95 + 1e-12
            assert stats.p95 <= hi + 1e-9
            assert stats.count == n


class TestAggregateSamples:
    def test_excludes_uncovered(self):
        samples = [
            LatencySample(0, 10.0),
            LatencySample(1, None),
            LatencySample(2, 20.0),
        ]
        stats = aggregate_samples(samples)
        assert stats.count == 2
        assert stats.mean == pytest.approx(15.0)

    def test_all_uncovered_is_empty(self):
        stats = aggregate_samples([LatencySample(i, None) for i in range(5)])
        assert stats == StatsSnapshot.empty()
