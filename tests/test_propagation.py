"""Tests for SGP4 propagation and the present/absent result filter."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import numpy as np
import pytest

from leolatency.core.elements import ElementSet
from leolatency.core.propagation import (
    InertialPosition,
    PropagationResult,
    as_utc,
    present_positions,
    propagate,
    propagate_batch,
)


ISS_LINE1 = "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993"
ISS_LINE2 = "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596"

HUBBLE_LINE1 = "1 20580U 90037B   24045.55478014  .00001456  00000-0  73052-4 0  9994"
HUBBLE_LINE2 = "2 20580  28.4701  41.0696 0002622 348.3544 140.2428 15.09435694872912"


@pytest.fixture
def iss() -> ElementSet:
    return ElementSet.from_lines(ISS_LINE1, ISS_LINE2, "ISS (ZARYA)")


@pytest.fixture
def hubble() -> ElementSet:
    return ElementSet.from_lines(HUBBLE_LINE1, HUBBLE_LINE2, "HST")


def _failing_element_set(error_code: int = 6) -> ElementSet:
    satrec = MagicMock()
    satrec.sgp4.return_value = (error_code, (math.nan, math.nan, math.nan), (math.nan, math.nan, math.nan))
    return ElementSet(
        name="DECAYED",
        line1="",
        line2="",
        norad_id=99999,
        epoch=datetime(2024, 2, 14, tzinfo=timezone.utc),
        inclination_deg=0.0,
        mean_motion_rev_per_day=16.0,
        satrec=satrec,
    )


def test_propagate_at_epoch(iss: ElementSet):
    position = propagate(iss, iss.epoch)
    assert isinstance(position, InertialPosition)
    assert position.epoch == iss.epoch
    assert 6500 < np.linalg.norm(position.as_array()) < 7000  # ISS is in LEO


def test_propagate_naive_datetime_treated_as_utc(iss: ElementSet):
    aware = iss.epoch + timedelta(minutes=30)
    naive = aware.replace(tzinfo=None)
    a = propagate(iss, aware)
    b = propagate(iss, naive)
    assert a is not None and b is not None
    np.testing.assert_allclose(a.as_array(), b.as_array())


def test_propagate_failure_returns_none():
    es = _failing_element_set()
    assert propagate(es, es.epoch) is None


def test_propagate_non_finite_position_returns_none():
    es = _failing_element_set(error_code=0)
    assert propagate(es, es.epoch) is None


def test_propagation_stale_elements(iss: ElementSet):
    """Far beyond epoch propagation may fail, but must not raise."""
    far_future = iss.epoch + timedelta(days=365 * 10)
    position = propagate(iss, far_future)
    assert position is None or isinstance(position, InertialPosition)


def test_batch_matches_single(iss: ElementSet, hubble: ElementSet):
    t = iss.epoch + timedelta(hours=1)
    results = propagate_batch([iss, hubble], t)
    assert [r.name for r in results] == ["ISS (ZARYA)", "HST"]
    assert all(r.present for r in results)
    assert all(r.error_code == 0 for r in results)

    single = propagate(hubble, t)
    assert single is not None
    np.testing.assert_allclose(results[1].position.as_array(), single.as_array(), atol=1e-6)


def test_batch_empty():
    assert propagate_batch([], datetime(2024, 2, 14, tzinfo=timezone.utc)) == []


def test_batch_far_future(iss: ElementSet):
    far = iss.epoch + timedelta(days=365 * 50)
    results = propagate_batch([iss], far)
    assert len(results) == 1
    if not results[0].present:
        assert results[0].position is None


def test_present_positions_filters_absent():
    t = datetime(2024, 2, 14, tzinfo=timezone.utc)
    kept = InertialPosition(7000.0, 0.0, 0.0, t)
    results = [
        PropagationResult("A", kept),
        PropagationResult("B", None, error_code=6),
        PropagationResult("C", None, error_code=-1),
    ]
    assert present_positions(results) == [kept]
    assert [r.present for r in results] == [True, False, False]


def test_as_utc_converts_offsets():
    tz = timezone(timedelta(hours=2))
    t = datetime(2024, 2, 14, 12, 0, tzinfo=tz)
    assert as_utc(t) == datetime(2024, 2, 14, 10, 0, tzinfo=timezone.utc)
    assert as_utc(t).tzinfo == timezone.utc
