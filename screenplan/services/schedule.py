"""Service for organising selections into a date-grouped, conflict-annotated itinerary."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Generic, Iterable

from screenplan.domain.models import Severity
from screenplan.services.clock import localize
from screenplan.services.conflicts import Conflict, T, conflicts_by_id, detect_conflicts
from screenplan.services.intervals import epoch_ms


@dataclass(frozen=True)
class ScheduleEntry(Generic[T]):
    item: T
    conflicts: list[Conflict[T]] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


@dataclass(frozen=True)
class DateGroup(Generic[T]):
    date: date
    entries: list[ScheduleEntry[T]]

    @property
    def items(self) -> list[T]:
        return [entry.item for entry in self.entries]


@dataclass(frozen=True)
class ScheduleStats:
    total_selections: int
    total_conflicts: int
    impossible_count: int
    warning_count: int
    dates: list[date]
    venues: list[str]


def date_key(item: T, tz: tzinfo | None = None) -> date:
    """Calendar date of the item's start, in *tz* or its own wall-clock offset.

    Naive starts are read as UTC, the same way the interval arithmetic reads them.
    """
    start = localize(item.start)
    if tz is not None:
        start = start.astimezone(tz)
    return start.date()


def sort_by_start(items: Iterable[T]) -> list[T]:
    """Stable ascending sort by start instant."""
    return sorted(items, key=lambda item: epoch_ms(item.start))


def group_by_date(items: Iterable[T], tz: tzinfo | None = None) -> dict[date, list[T]]:
    """Time-ordered items keyed by calendar date, dates ascending."""
    groups: dict[date, list[T]] = {}
    for item in sort_by_start(items):
        groups.setdefault(date_key(item, tz), []).append(item)
    return {day: groups[day] for day in sorted(groups)}


def group_by_date_with_conflicts(
    items: Iterable[T], tz: tzinfo | None = None
) -> list[DateGroup[T]]:
    """Build the itinerary view: one group per date, each time-ordered.

    Conflicts are detected within a date only. A screening that runs past
    midnight is still grouped under its start date and is not compared with
    the next day's screenings.
    """
    result: list[DateGroup[T]] = []
    for day, members in group_by_date(items, tz).items():
        index = conflicts_by_id(detect_conflicts(members))
        entries = [ScheduleEntry(item, index.get(item.id, [])) for item in members]
        result.append(DateGroup(day, entries))
    return result


def schedule_stats(items: Iterable[T], tz: tzinfo | None = None) -> ScheduleStats:
    """Summary counts over the whole selection set."""
    snapshot = list(items)
    conflicts = detect_conflicts(snapshot)
    severities = Counter(c.severity for c in conflicts)
    return ScheduleStats(
        total_selections=len(snapshot),
        total_conflicts=len(conflicts),
        impossible_count=severities[Severity.IMPOSSIBLE],
        warning_count=severities[Severity.WARNING],
        dates=sorted({date_key(item, tz) for item in snapshot}),
        venues=sorted({item.venue_id for item in snapshot if item.venue_id}),
    )
