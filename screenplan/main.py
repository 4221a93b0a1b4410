"""FastAPI application — entry point for the festival screening planner."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from screenplan.config import Settings
from screenplan.domain.bus import EventBus
from screenplan.domain.events import SelectionAdded, SelectionRemoved, SelectionsCleared
from screenplan.domain.handlers import HandlerRegistry
from screenplan.domain.models import (
    AddSelectionRequest,
    Category,
    ConflictInfo,
    DateGroupOut,
    Film,
    ScheduleEntryOut,
    ScheduleStatsOut,
    Screening,
    Selection,
    Severity,
    Venue,
)
from screenplan.errors import DuplicateSelectionError
from screenplan.logging_setup import configure_logging
from screenplan.repos.base import SelectionStore
from screenplan.repos.catalogue import Catalogue
from screenplan.repos.json_file import JsonFileSelectionStore
from screenplan.repos.memory import InMemorySelectionStore
from screenplan.services.conflicts import TRAVEL_BUFFER_MINUTES, Conflict, detect_conflicts, would_conflict
from screenplan.services.schedule import group_by_date_with_conflicts, schedule_stats

logger = logging.getLogger(__name__)

settings = Settings.from_env()
configure_logging(settings.log_level)

app = FastAPI(title="Festival Screening Planner")


def create_store(settings: Settings) -> SelectionStore:
    """JSON file store when a path is configured, in-memory otherwise."""
    if settings.store_path is not None:
        return JsonFileSelectionStore(settings.store_path, default_tz=settings.tz)
    return InMemorySelectionStore()


# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
catalogue = Catalogue(settings.data_dir, default_tz=settings.tz)
selection_store = create_store(settings)

handler_registry = HandlerRegistry(bus=event_bus, store=selection_store)


def to_conflict_info(conflict: Conflict) -> ConflictInfo:
    if conflict.severity == Severity.IMPOSSIBLE:
        message = f"Overlaps {conflict.overlap_minutes:g} minutes with another screening"
    else:
        message = (
            f"Less than {TRAVEL_BUFFER_MINUTES} minutes between screenings "
            "at different venues"
        )
    return ConflictInfo(
        severity=conflict.severity,
        screening_ids=list(conflict.ids),
        overlap_minutes=conflict.overlap_minutes,
        message=message,
    )


def _get_screening_or_404(screening_id: str) -> Screening:
    screening = catalogue.screening(screening_id)
    if screening is None:
        raise HTTPException(status_code=404, detail="Screening not found")
    return screening


# ── Catalogue ─────────────────────────────────────────────────────────


@app.get("/films", response_model=list[Film])
def list_films() -> list[Film]:
    return catalogue.films()


@app.get("/films/{film_id}", response_model=Film)
def get_film(film_id: str) -> Film:
    film = catalogue.film(film_id)
    if film is None:
        raise HTTPException(status_code=404, detail="Film not found")
    return film


@app.get("/films/{film_id}/screenings", response_model=list[Screening])
def list_film_screenings(film_id: str) -> list[Screening]:
    """Return a film's screenings in time order."""
    if catalogue.film(film_id) is None:
        raise HTTPException(status_code=404, detail="Film not found")
    return catalogue.screenings_for_film(film_id)


@app.get("/venues", response_model=list[Venue])
def list_venues() -> list[Venue]:
    return catalogue.venues()


@app.get("/categories", response_model=list[Category])
def list_categories() -> list[Category]:
    return catalogue.categories()


@app.get("/screenings/{screening_id}", response_model=Screening)
def get_screening(screening_id: str) -> Screening:
    return _get_screening_or_404(screening_id)


@app.get("/screenings/{screening_id}/conflicts", response_model=list[ConflictInfo])
def preview_conflicts(screening_id: str) -> list[ConflictInfo]:
    """Conflicts this screening would introduce if selected. Nothing is stored."""
    _get_screening_or_404(screening_id)
    candidate = catalogue.build_selection(screening_id)
    return [to_conflict_info(c) for c in would_conflict(selection_store.list(), candidate)]


# ── Selections ────────────────────────────────────────────────────────


@app.get("/selections", response_model=list[Selection])
def list_selections() -> list[Selection]:
    return selection_store.list()


@app.post("/selections", response_model=Selection, status_code=201)
def add_selection(body: AddSelectionRequest) -> Selection:
    """Select a screening, snapshotting its film and venue."""
    _get_screening_or_404(body.screening_id)
    selection = catalogue.build_selection(body.screening_id)
    try:
        selection_store.add(selection)
    except DuplicateSelectionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    event_bus.publish(SelectionAdded(screening_id=selection.screening_id))
    return selection


@app.delete("/selections/{screening_id}", status_code=200)
def remove_selection(screening_id: str) -> dict:
    if not selection_store.remove(screening_id):
        raise HTTPException(status_code=404, detail="Selection not found")
    event_bus.publish(SelectionRemoved(screening_id=screening_id))
    return {"status": "removed"}


@app.delete("/selections", status_code=200)
def clear_selections() -> dict:
    removed = len(selection_store.list())
    selection_store.clear()
    event_bus.publish(SelectionsCleared(removed_count=removed))
    return {"status": "cleared", "removed": removed}


# ── Schedule ──────────────────────────────────────────────────────────


@app.get("/schedule", response_model=list[DateGroupOut])
def get_schedule() -> list[DateGroupOut]:
    """Return selections grouped by date, time-ordered, with conflicts attached."""
    groups = group_by_date_with_conflicts(selection_store.list(), tz=settings.tz)
    return [
        DateGroupOut(
            date=group.date,
            entries=[
                ScheduleEntryOut(
                    selection=entry.item,
                    conflicts=[to_conflict_info(c) for c in entry.conflicts],
                )
                for entry in group.entries
            ],
        )
        for group in groups
    ]


@app.get("/schedule/conflicts", response_model=list[ConflictInfo])
def get_schedule_conflicts() -> list[ConflictInfo]:
    return [to_conflict_info(c) for c in detect_conflicts(selection_store.list())]


@app.get("/schedule/stats", response_model=ScheduleStatsOut)
def get_schedule_stats() -> ScheduleStatsOut:
    stats = schedule_stats(selection_store.list(), tz=settings.tz)
    return ScheduleStatsOut(
        total_selections=stats.total_selections,
        total_conflicts=stats.total_conflicts,
        impossible_count=stats.impossible_count,
        warning_count=stats.warning_count,
        dates=stats.dates,
        venues=stats.venues,
    )
