"""Selection store persisted as a versioned JSON document on disk."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from screenplan.domain.models import Language, Selection
from screenplan.errors import DuplicateSelectionError, StorageError
from screenplan.repos.base import SelectionStore
from screenplan.services.clock import parse_instant

logger = logging.getLogger(__name__)

CURRENT_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Preferences(BaseModel):
    language: Language = Language.TC


class StoredDocument(BaseModel):
    version: int = CURRENT_VERSION
    last_updated: datetime = Field(default_factory=_utcnow)
    selections: list[Selection] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=Preferences)


def _upgrade_selection(raw: dict[str, Any], default_tz: tzinfo | None) -> dict[str, Any]:
    """Bring a pre-v1 selection record into the current shape.

    Old records kept venue names on the screening snapshot and had no venue
    id; the English name was the venue identity, so it becomes the id.
    """
    if not isinstance(raw, dict):
        raise ValueError("selection record must be a JSON object")
    record = dict(raw)
    snapshot = record.get("screening_snapshot") or {}
    if not isinstance(snapshot, dict):
        raise ValueError("screening_snapshot must be a JSON object")
    snapshot = dict(snapshot)
    if "venue_snapshot" not in record:
        name_en = snapshot.pop("venue_name_en", "")
        name_tc = snapshot.pop("venue_name_tc", "")
        record["venue_snapshot"] = {"id": name_en or None, "name_en": name_en, "name_tc": name_tc}
    if isinstance(snapshot.get("datetime"), str):
        snapshot["datetime"] = parse_instant(snapshot["datetime"], default_tz)
    record["screening_snapshot"] = snapshot
    return record


def migrate_document(data: Any, default_tz: tzinfo | None = None) -> tuple[StoredDocument, bool]:
    """Parse raw JSON into a StoredDocument.

    Returns ``(document, migrated)``; *migrated* is True when the input was
    an older layout and should be written back.
    """
    if not isinstance(data, dict):
        raise ValueError("storage document must be a JSON object")

    version = data.get("version") or 0
    if not isinstance(version, int) or isinstance(version, bool):
        raise ValueError(f"unsupported storage version: {version!r}")
    if version >= CURRENT_VERSION:
        return StoredDocument.model_validate(data), False

    preferences = data.get("preferences") or {}
    if not isinstance(preferences, dict):
        raise ValueError("preferences must be a JSON object")
    selections = data.get("selections") or []
    if not isinstance(selections, list):
        raise ValueError("selections must be a JSON array")
    language = data.get("language_preference") or preferences.get("language") or Language.TC
    document = StoredDocument(
        selections=[_upgrade_selection(s, default_tz) for s in selections],
        preferences=Preferences(language=language),
    )
    return document, True


class JsonFileSelectionStore(SelectionStore):
    """Selections kept in a single JSON file, re-read on every call.

    Unreadable or corrupt files are treated as empty (and logged). Failures
    to write raise StorageError, except the write-back after a migration,
    which is logged so that reads never raise.
    """

    def __init__(self, path: Path | str, default_tz: tzinfo | None = None) -> None:
        self.path = Path(path)
        self.default_tz = default_tz

    # ------------------------------------------------------------------
    # Document I/O
    # ------------------------------------------------------------------

    def load(self) -> StoredDocument:
        if not self.path.exists():
            return StoredDocument()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            document, migrated = migrate_document(data, self.default_tz)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning(
                "Failed to load selections, using an empty schedule",
                extra={"path": str(self.path), "error": str(exc)},
            )
            return StoredDocument()

        if migrated:
            logger.info("Migrated selection file", extra={"path": str(self.path)})
            try:
                self.save(document)
            except StorageError:
                logger.warning(
                    "Could not write back migrated selections; serving them from memory",
                    extra={"path": str(self.path)},
                )
        return document

    def save(self, document: StoredDocument) -> None:
        document.last_updated = _utcnow()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(document.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to save selections", extra={"path": str(self.path)})
            raise StorageError("Failed to save selections") from exc

    # ------------------------------------------------------------------
    # SelectionStore
    # ------------------------------------------------------------------

    def list(self) -> list[Selection]:
        return self.load().selections

    def add(self, selection: Selection) -> Selection:
        document = self.load()
        if any(s.screening_id == selection.screening_id for s in document.selections):
            raise DuplicateSelectionError(selection.screening_id)
        document.selections.append(selection)
        self.save(document)
        return selection

    def remove(self, screening_id: str) -> bool:
        document = self.load()
        kept = [s for s in document.selections if s.screening_id != screening_id]
        if len(kept) == len(document.selections):
            return False
        document.selections = kept
        self.save(document)
        return True

    def clear(self) -> None:
        document = self.load()
        document.selections = []
        self.save(document)

    def get_language(self) -> Language:
        return self.load().preferences.language

    def set_language(self, language: Language | str) -> None:
        document = self.load()
        document.preferences.language = Language(language)
        self.save(document)
