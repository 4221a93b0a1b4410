"""Exceptions raised by the selection store and catalogue collaborators."""

from __future__ import annotations


class ScreenplanError(Exception):
    """Base class for planner errors."""


class DuplicateSelectionError(ScreenplanError):
    def __init__(self, screening_id: str) -> None:
        super().__init__(f"Screening {screening_id} is already selected")
        self.screening_id = screening_id


class SelectionNotFoundError(ScreenplanError):
    def __init__(self, screening_id: str) -> None:
        super().__init__(f"Screening {screening_id} is not selected")
        self.screening_id = screening_id


class StorageError(ScreenplanError):
    """Selections could not be written to durable storage."""


class CatalogueError(ScreenplanError):
    """A catalogue file is missing or malformed."""
