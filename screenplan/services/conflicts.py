"""Service for detecting scheduling conflicts between screenings."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from screenplan.domain.models import Schedulable, Severity
from screenplan.services.intervals import Interval, gap_minutes, overlap_minutes

TRAVEL_BUFFER_MINUTES = 30

T = TypeVar("T", bound=Schedulable)


@dataclass(frozen=True)
class Conflict(Generic[T]):
    """A scheduling problem between two items; ``a`` is the first seen."""

    a: T
    b: T
    severity: Severity
    overlap_minutes: float

    @property
    def ids(self) -> tuple[str, str]:
        return (self.a.id, self.b.id)

    def involves(self, item_id: str) -> bool:
        return item_id in self.ids

    def other(self, item_id: str) -> T:
        """Return the member of the pair that is not *item_id*."""
        if self.a.id == item_id:
            return self.b
        if self.b.id == item_id:
            return self.a
        raise KeyError(item_id)


def same_venue(a: Schedulable, b: Schedulable) -> bool:
    """Exact venue identity; an unresolved venue matches nothing."""
    if not a.venue_id or not b.venue_id:
        return False
    return a.venue_id == b.venue_id


def classify(a: T, b: T) -> Conflict[T] | None:
    """Classify a single pair.

    Rules:
    - any true overlap is ``impossible`` regardless of venue;
    - different venues closer than TRAVEL_BUFFER_MINUTES are a ``warning``;
    - the same venue is never a warning, however tight the turnaround.
    Exact boundary touches (end == start) are NOT overlaps.
    """
    ia, ib = Interval.of(a), Interval.of(b)
    overlap = overlap_minutes(ia, ib)
    if overlap > 0:
        return Conflict(a, b, Severity.IMPOSSIBLE, overlap)
    if not same_venue(a, b) and gap_minutes(ia, ib) < TRAVEL_BUFFER_MINUTES:
        return Conflict(a, b, Severity.WARNING, 0)
    return None


def detect_conflicts(items: Iterable[T]) -> list[Conflict[T]]:
    """Return every conflicting pair, in input order (i < j).

    Conflicts are not merged across more than two items: one item may show
    up in any number of pairs.
    """
    snapshot = list(items)
    conflicts: list[Conflict[T]] = []
    for i, a in enumerate(snapshot):
        for b in snapshot[i + 1 :]:
            conflict = classify(a, b)
            if conflict is not None:
                conflicts.append(conflict)
    return conflicts


def would_conflict(existing: Iterable[T], candidate: T) -> list[Conflict[T]]:
    """Return the conflicts *candidate* would introduce if it were added.

    *existing* is read, never modified. An existing entry with the
    candidate's id is skipped so an already-selected screening is not
    compared with itself.
    """
    others = [item for item in existing if item.id != candidate.id]
    conflicts = detect_conflicts([*others, candidate])
    return [c for c in conflicts if c.involves(candidate.id)]


def conflicts_by_id(conflicts: Iterable[Conflict[T]]) -> dict[str, list[Conflict[T]]]:
    """Index conflicts under both ids of each pair."""
    index: dict[str, list[Conflict[T]]] = defaultdict(list)
    for conflict in conflicts:
        index[conflict.a.id].append(conflict)
        index[conflict.b.id].append(conflict)
    return dict(index)
