"""Occupied time windows and overlap arithmetic for screenings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from screenplan.domain.models import Schedulable

MS_PER_MINUTE = 60_000

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def epoch_ms(value: datetime) -> int:
    """Milliseconds since the Unix epoch; naive values are read as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // _ONE_MS


@dataclass(frozen=True)
class Interval:
    """Half-open window ``[start_ms, end_ms)`` in epoch milliseconds."""

    start_ms: int
    end_ms: int

    @classmethod
    def of(cls, item: Schedulable) -> Interval:
        start_ms = epoch_ms(item.start)
        return cls(start_ms, start_ms + item.duration_minutes * MS_PER_MINUTE)

    @property
    def duration_minutes(self) -> float:
        return (self.end_ms - self.start_ms) / MS_PER_MINUTE


def overlap_minutes(a: Interval, b: Interval) -> float:
    """Minutes shared by *a* and *b*; touching boundaries give 0."""
    overlap_ms = min(a.end_ms, b.end_ms) - max(a.start_ms, b.start_ms)
    return max(0, overlap_ms) / MS_PER_MINUTE


def has_overlap(a: Interval, b: Interval) -> bool:
    return overlap_minutes(a, b) > 0


def gap_minutes(a: Interval, b: Interval) -> float:
    """Minutes between the earlier window's end and the later one's start.

    Only meaningful for windows that do not overlap.
    """
    if a.end_ms <= b.start_ms:
        return (b.start_ms - a.end_ms) / MS_PER_MINUTE
    return (a.start_ms - b.end_ms) / MS_PER_MINUTE
