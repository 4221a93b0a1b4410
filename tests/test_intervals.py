"""Tests for interval arithmetic."""

from datetime import datetime, timedelta, timezone

from screenplan.domain.models import Screening
from screenplan.services.intervals import (
    Interval,
    epoch_ms,
    gap_minutes,
    has_overlap,
    overlap_minutes,
)

_START = datetime(2025, 3, 15, 14, 0, tzinfo=timezone.utc)


def _interval(offset_minutes: float, duration_minutes: float) -> Interval:
    start = epoch_ms(_START + timedelta(minutes=offset_minutes))
    return Interval(start, start + int(duration_minutes * 60_000))


def test_interval_of_screening():
    screening = Screening(id="s", film_id="f", start=_START, duration_minutes=120)

    interval = Interval.of(screening)

    assert interval.end_ms - interval.start_ms == 120 * 60_000
    assert interval.duration_minutes == 120


def test_epoch_ms_respects_offsets():
    hong_kong = timezone(timedelta(hours=8))
    local = datetime(2025, 3, 15, 22, 0, tzinfo=hong_kong)

    assert epoch_ms(local) == epoch_ms(_START)


def test_partial_overlap():
    assert overlap_minutes(_interval(0, 120), _interval(60, 90)) == 60


def test_containment_overlap():
    assert overlap_minutes(_interval(0, 180), _interval(30, 60)) == 60


def test_touching_boundary_is_zero():
    a, b = _interval(0, 60), _interval(60, 60)

    assert overlap_minutes(a, b) == 0
    assert has_overlap(a, b) is False


def test_overlap_is_not_rounded():
    a = _interval(0, 60)
    b = _interval(59.5, 60)

    assert overlap_minutes(a, b) == 0.5


def test_gap_in_either_order():
    a, b = _interval(0, 60), _interval(75, 60)

    assert gap_minutes(a, b) == 15
    assert gap_minutes(b, a) == 15
