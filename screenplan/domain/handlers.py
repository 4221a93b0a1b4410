"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from screenplan.domain.bus import EventBus
from screenplan.domain.events import SelectionAdded, SelectionRemoved, SelectionsCleared
from screenplan.domain.models import Selection
from screenplan.repos.base import SelectionStore
from screenplan.services.conflicts import Conflict, would_conflict

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires selection-event handlers to the bus with access to the store.

    Every handler reads a fresh snapshot from the store; nothing computed
    here outlives the call.
    """

    def __init__(self, bus: EventBus, store: SelectionStore) -> None:
        self.bus = bus
        self.store = store
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(SelectionAdded, self.on_selection_added)
        self.bus.subscribe(SelectionRemoved, self.on_selection_removed)
        self.bus.subscribe(SelectionsCleared, self.on_selections_cleared)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_selection_added(self, event: SelectionAdded) -> list[Conflict[Selection]]:
        snapshot = self.store.list()
        added = next((s for s in snapshot if s.screening_id == event.screening_id), None)
        if added is None:
            return []

        conflicts = would_conflict(snapshot, added)
        for conflict in conflicts:
            logger.warning(
                "Selection %s conflicts with %s (%s)",
                event.screening_id,
                conflict.other(event.screening_id).screening_id,
                conflict.severity,
                extra={"overlap_minutes": conflict.overlap_minutes},
            )
        logger.info(
            "Selection added",
            extra={"screening_id": event.screening_id, "conflicts": len(conflicts)},
        )
        return conflicts

    def on_selection_removed(self, event: SelectionRemoved) -> None:
        logger.info(
            "Selection removed",
            extra={"screening_id": event.screening_id, "remaining": len(self.store.list())},
        )

    def on_selections_cleared(self, event: SelectionsCleared) -> None:
        logger.info("Selections cleared", extra={"removed_count": event.removed_count})
