"""In-memory selection store."""

from __future__ import annotations

import logging

from screenplan.domain.models import Selection
from screenplan.errors import DuplicateSelectionError
from screenplan.repos.base import SelectionStore

logger = logging.getLogger(__name__)


class InMemorySelectionStore(SelectionStore):
    """Dict-backed store for Selection instances, keyed by screening id."""

    def __init__(self, selections: list[Selection] | None = None) -> None:
        self._store: dict[str, Selection] = {}
        for selection in selections or []:
            self.add(selection)

    def list(self) -> list[Selection]:
        return list(self._store.values())

    def get(self, screening_id: str) -> Selection | None:
        return self._store.get(screening_id)

    def add(self, selection: Selection) -> Selection:
        if selection.screening_id in self._store:
            raise DuplicateSelectionError(selection.screening_id)
        self._store[selection.screening_id] = selection
        logger.debug("Selection added", extra={"screening_id": selection.screening_id})
        return selection

    def remove(self, screening_id: str) -> bool:
        removed = self._store.pop(screening_id, None) is not None
        if removed:
            logger.debug("Selection removed", extra={"screening_id": screening_id})
        return removed

    def clear(self) -> None:
        self._store.clear()
