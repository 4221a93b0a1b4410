"""Tests for the in-memory and JSON-file selection stores."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from screenplan.domain.models import (
    FilmSnapshot,
    Language,
    ScreeningSnapshot,
    Selection,
    VenueSnapshot,
)
from screenplan.errors import DuplicateSelectionError, StorageError
from screenplan.repos.json_file import CURRENT_VERSION, JsonFileSelectionStore
from screenplan.repos.memory import InMemorySelectionStore

_HKT = timezone(timedelta(hours=8))
_START = datetime(2025, 3, 15, 14, 0, tzinfo=_HKT)


def _make_selection(screening_id: str, hours_later: int = 0) -> Selection:
    return Selection(
        screening_id=screening_id,
        film_snapshot=FilmSnapshot(id="film-1", title_en="Opening Night"),
        screening_snapshot=ScreeningSnapshot(
            id=screening_id, start=_START + timedelta(hours=hours_later), duration_minutes=120
        ),
        venue_snapshot=VenueSnapshot(id="venue-36", name_en="Broadway Cinematheque"),
    )


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemorySelectionStore()
    return JsonFileSelectionStore(tmp_path / "selections.json")


# ---------------------------------------------------------------------------
# Shared SelectionStore behaviour
# ---------------------------------------------------------------------------


def test_add_and_list_preserves_order(store):
    store.add(_make_selection("s-2", 3))
    store.add(_make_selection("s-1"))

    assert [s.screening_id for s in store.list()] == ["s-2", "s-1"]
    assert store.is_selected("s-1")
    assert store.get("s-2").start == _START + timedelta(hours=3)


def test_duplicate_add_raises(store):
    store.add(_make_selection("s-1"))

    with pytest.raises(DuplicateSelectionError):
        store.add(_make_selection("s-1"))
    assert len(store.list()) == 1


def test_remove(store):
    store.add(_make_selection("s-1"))

    assert store.remove("s-1") is True
    assert store.remove("s-1") is False
    assert store.list() == []


def test_clear(store):
    store.add(_make_selection("s-1"))
    store.add(_make_selection("s-2", 3))

    store.clear()

    assert store.list() == []
    assert store.get("s-1") is None


def test_list_returns_snapshot(store):
    store.add(_make_selection("s-1"))
    snapshot = store.list()

    store.add(_make_selection("s-2", 3))

    assert len(snapshot) == 1


# ---------------------------------------------------------------------------
# JSON file specifics
# ---------------------------------------------------------------------------


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "selections.json"
    JsonFileSelectionStore(path).add(_make_selection("s-1"))

    reopened = JsonFileSelectionStore(path)

    assert [s.screening_id for s in reopened.list()] == ["s-1"]
    assert reopened.list()[0].start == _START
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["version"] == CURRENT_VERSION
    assert document["selections"][0]["screening_snapshot"]["datetime"].startswith("2025-03-15T14:00:00")


def test_json_store_language_preference(tmp_path):
    store = JsonFileSelectionStore(tmp_path / "selections.json")
    assert store.get_language() == Language.TC

    store.set_language("en")

    assert store.get_language() == Language.EN


def test_corrupt_file_reads_as_empty(tmp_path, caplog):
    path = tmp_path / "selections.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileSelectionStore(path)

    assert store.list() == []
    assert "Failed to load selections" in caplog.text


@pytest.mark.parametrize(
    "content",
    [
        {"version": "1", "selections": []},
        {"selections": [123]},
        {"selections": [{"screening_id": "s-1", "screening_snapshot": "oops"}]},
        {"selections": {"s-1": {}}},
        {"preferences": "en"},
    ],
)
def test_malformed_document_reads_as_empty(tmp_path, caplog, content):
    path = tmp_path / "selections.json"
    path.write_text(json.dumps(content), encoding="utf-8")

    store = JsonFileSelectionStore(path)

    assert store.list() == []
    assert "Failed to load selections" in caplog.text


def test_legacy_document_is_migrated(tmp_path):
    path = tmp_path / "selections.json"
    legacy = {
        "language_preference": "en",
        "selections": [
            {
                "screening_id": "s-1",
                "added_at": "2025-03-01T10:00:00Z",
                "film_snapshot": {"id": "film-1", "title_tc": "", "title_en": "Opening Night", "poster_url": ""},
                "screening_snapshot": {
                    "id": "s-1",
                    "datetime": "2025-03-15T14:00:00",
                    "duration_minutes": 120,
                    "venue_name_tc": "百老匯電影中心",
                    "venue_name_en": "Broadway Cinematheque",
                },
            }
        ],
    }
    path.write_text(json.dumps(legacy), encoding="utf-8")

    store = JsonFileSelectionStore(path, default_tz=_HKT)
    selections = store.list()

    assert len(selections) == 1
    assert selections[0].venue_id == "Broadway Cinematheque"
    assert selections[0].venue_snapshot.name_tc == "百老匯電影中心"
    assert selections[0].start == _START
    assert store.get_language() == Language.EN
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == CURRENT_VERSION


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileSelectionStore(blocker / "selections.json")

    with pytest.raises(StorageError):
        store.add(_make_selection("s-1"))


def test_migration_write_back_failure_still_reads(tmp_path, monkeypatch, caplog):
    path = tmp_path / "selections.json"
    legacy = {
        "selections": [
            {
                "screening_id": "s-1",
                "film_snapshot": {"id": "film-1"},
                "screening_snapshot": {
                    "id": "s-1",
                    "datetime": "2025-03-15T14:00:00+08:00",
                    "duration_minutes": 120,
                    "venue_name_en": "Broadway Cinematheque",
                },
            }
        ],
    }
    path.write_text(json.dumps(legacy), encoding="utf-8")
    store = JsonFileSelectionStore(path)

    def _fail(document):
        raise StorageError("Failed to save selections")

    monkeypatch.setattr(store, "save", _fail)

    selections = store.list()

    assert [s.screening_id for s in selections] == ["s-1"]
    assert "Could not write back migrated selections" in caplog.text
    assert "version" not in json.loads(path.read_text(encoding="utf-8"))
