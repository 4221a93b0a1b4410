"""Domain events emitted when the selection set changes."""

from __future__ import annotations

from pydantic import BaseModel


class SelectionAdded(BaseModel):
    """Fired after a screening is stored as a selection."""

    screening_id: str


class SelectionRemoved(BaseModel):
    screening_id: str


class SelectionsCleared(BaseModel):
    """Fired after every selection is dropped."""

    removed_count: int
