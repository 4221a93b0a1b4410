"""Selection store interface.

The planner reads a snapshot from the store on every query and never keeps
selections of its own; any implementation below can be swapped in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from screenplan.domain.models import Selection


class SelectionStore(ABC):
    """Durable record of the screenings a user has chosen."""

    @abstractmethod
    def list(self) -> list[Selection]:
        """Return all selections in the order they were added."""
        ...

    @abstractmethod
    def add(self, selection: Selection) -> Selection:
        """Persist *selection*.

        Raises DuplicateSelectionError if the screening is already selected.
        """
        ...

    @abstractmethod
    def remove(self, screening_id: str) -> bool:
        """Drop a selection; return False when nothing was removed."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def get(self, screening_id: str) -> Selection | None:
        for selection in self.list():
            if selection.screening_id == screening_id:
                return selection
        return None

    def is_selected(self, screening_id: str) -> bool:
        return self.get(screening_id) is not None
