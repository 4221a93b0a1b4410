"""Domain models for the festival screening planner."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Protocol

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class Severity(StrEnum):
    IMPOSSIBLE = "impossible"
    WARNING = "warning"


class Language(StrEnum):
    TC = "tc"
    EN = "en"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Schedulable(Protocol):
    """The narrow shape the conflict engine reasons about.

    Anything exposing these four attributes can be fed to the detector and
    the grouper; extra display fields are never inspected.
    """

    @property
    def id(self) -> str: ...

    @property
    def start(self) -> datetime: ...

    @property
    def duration_minutes(self) -> int: ...

    @property
    def venue_id(self) -> str | None: ...


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


class Film(BaseModel):
    id: str
    title_tc: str = ""
    title_en: str = ""
    category_id: str | None = None
    synopsis_tc: str = ""
    synopsis_en: str = ""
    runtime_minutes: int | None = None
    director: str = ""
    country: str = ""
    poster_url: str = ""
    detail_url_tc: str = ""
    detail_url_en: str = ""


class Venue(BaseModel):
    id: str
    name_tc: str = ""
    name_en: str = ""
    address_tc: str | None = None
    address_en: str | None = None


class Category(BaseModel):
    id: str
    name_tc: str = ""
    name_en: str = ""
    sort_order: int = 0
    description_tc: str = ""
    description_en: str = ""


class Screening(BaseModel):
    """A single scheduled showing; ``start`` is read from the ``datetime`` key."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    film_id: str
    venue_id: str | None = None
    start: AwareDatetime = Field(alias="datetime")
    duration_minutes: int
    language: str = ""


# ---------------------------------------------------------------------------
# Selections (denormalised snapshots owned by the selection store)
# ---------------------------------------------------------------------------


class FilmSnapshot(BaseModel):
    id: str
    title_tc: str = ""
    title_en: str = ""
    poster_url: str = ""


class ScreeningSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    start: AwareDatetime = Field(alias="datetime")
    duration_minutes: int
    language: str = ""


class VenueSnapshot(BaseModel):
    id: str | None = None
    name_tc: str = ""
    name_en: str = ""


class Selection(BaseModel):
    """A screening the user has chosen, with enough data to render it offline."""

    screening_id: str
    added_at: datetime = Field(default_factory=_utcnow)
    film_snapshot: FilmSnapshot
    screening_snapshot: ScreeningSnapshot
    venue_snapshot: VenueSnapshot

    @property
    def id(self) -> str:
        return self.screening_id

    @property
    def start(self) -> datetime:
        return self.screening_snapshot.start

    @property
    def duration_minutes(self) -> int:
        return self.screening_snapshot.duration_minutes

    @property
    def venue_id(self) -> str | None:
        return self.venue_snapshot.id


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class AddSelectionRequest(BaseModel):
    screening_id: str


class ConflictInfo(BaseModel):
    severity: Severity
    screening_ids: list[str]
    overlap_minutes: float
    message: str


class ScheduleEntryOut(BaseModel):
    selection: Selection
    conflicts: list[ConflictInfo] = Field(default_factory=list)


class DateGroupOut(BaseModel):
    date: date
    entries: list[ScheduleEntryOut]


class ScheduleStatsOut(BaseModel):
    total_selections: int
    total_conflicts: int
    impossible_count: int
    warning_count: int
    dates: list[date]
    venues: list[str]
