"""Read-only festival catalogue loaded from static JSON files."""

from __future__ import annotations

import json
import logging
from datetime import tzinfo
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from screenplan.domain.models import (
    Category,
    Film,
    FilmSnapshot,
    Screening,
    ScreeningSnapshot,
    Selection,
    Venue,
    VenueSnapshot,
)
from screenplan.errors import CatalogueError
from screenplan.services.clock import parse_instant
from screenplan.services.schedule import sort_by_start

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class Catalogue:
    """Films, screenings, venues and categories, loaded lazily and cached.

    Naive screening times in the data files are read in *default_tz*
    (UTC when unset).
    """

    def __init__(self, data_dir: Path | str, default_tz: tzinfo | None = None) -> None:
        self.data_dir = Path(data_dir)
        self.default_tz = default_tz
        self._films: dict[str, Film] | None = None
        self._screenings: dict[str, Screening] | None = None
        self._venues: dict[str, Venue] | None = None
        self._categories: dict[str, Category] | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _read(self, filename: str) -> list[dict[str, Any]]:
        path = self.data_dir / filename
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise CatalogueError(f"Catalogue file not found: {path}") from exc
        except (OSError, ValueError) as exc:
            raise CatalogueError(f"Error loading {filename}: {exc}") from exc
        if not isinstance(data, list):
            raise CatalogueError(f"Error loading {filename}: expected a JSON array")
        return data

    def _load(self, filename: str, model: type[M]) -> dict[str, M]:
        rows = self._read(filename)
        if model is Screening:
            rows = [self._localize_row(row) for row in rows]
        try:
            records = [model.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise CatalogueError(f"Error loading {filename}: {exc}") from exc
        logger.debug("Loaded catalogue file", extra={"file": filename, "count": len(records)})
        return {record.id: record for record in records}

    def _localize_row(self, row: Any) -> Any:
        if isinstance(row, dict) and isinstance(row.get("datetime"), str):
            try:
                row = {**row, "datetime": parse_instant(row["datetime"], self.default_tz)}
            except ValueError:
                pass  # left for pydantic to report
        return row

    def load_all(self) -> None:
        """Load every file up front; raises CatalogueError on the first bad one."""
        films = self._load("films.json", Film)
        screenings = self._load("screenings.json", Screening)
        venues = self._load("venues.json", Venue)
        categories = self._load("categories.json", Category)
        self._films, self._screenings = films, screenings
        self._venues, self._categories = venues, categories
        logger.info(
            "Catalogue loaded",
            extra={
                "films": len(self._films),
                "screenings": len(self._screenings),
                "venues": len(self._venues),
            },
        )

    def _ensure_loaded(self) -> None:
        if self._films is None:
            self.load_all()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def films(self) -> list[Film]:
        self._ensure_loaded()
        return list(self._films.values())

    def film(self, film_id: str) -> Film | None:
        self._ensure_loaded()
        return self._films.get(film_id)

    def screenings(self) -> list[Screening]:
        self._ensure_loaded()
        return sort_by_start(self._screenings.values())

    def screening(self, screening_id: str) -> Screening | None:
        self._ensure_loaded()
        return self._screenings.get(screening_id)

    def screenings_for_film(self, film_id: str) -> list[Screening]:
        return [s for s in self.screenings() if s.film_id == film_id]

    def venues(self) -> list[Venue]:
        self._ensure_loaded()
        return list(self._venues.values())

    def venue(self, venue_id: str | None) -> Venue | None:
        self._ensure_loaded()
        if not venue_id:
            return None
        return self._venues.get(venue_id)

    def categories(self) -> list[Category]:
        self._ensure_loaded()
        return sorted(self._categories.values(), key=lambda c: c.sort_order)

    def category(self, category_id: str) -> Category | None:
        self._ensure_loaded()
        return self._categories.get(category_id)

    # ------------------------------------------------------------------
    # Denormalisation
    # ------------------------------------------------------------------

    def build_selection(self, screening_id: str) -> Selection | None:
        """Snapshot a screening with its film and venue, ready for the store.

        Returns ``None`` if the screening is unknown. A screening whose film
        or venue is missing from the catalogue still yields a selection with
        empty display fields.
        """
        screening = self.screening(screening_id)
        if screening is None:
            return None

        film = self.film(screening.film_id)
        venue = self.venue(screening.venue_id)
        if film is None or venue is None:
            logger.warning(
                "Screening references missing catalogue records",
                extra={"screening_id": screening_id, "film_id": screening.film_id},
            )

        return Selection(
            screening_id=screening.id,
            film_snapshot=FilmSnapshot(
                id=screening.film_id,
                title_tc=film.title_tc if film else "",
                title_en=film.title_en if film else "",
                poster_url=film.poster_url if film else "",
            ),
            screening_snapshot=ScreeningSnapshot(
                id=screening.id,
                start=screening.start,
                duration_minutes=screening.duration_minutes,
                language=screening.language,
            ),
            venue_snapshot=VenueSnapshot(
                id=screening.venue_id,
                name_tc=venue.name_tc if venue else "",
                name_en=venue.name_en if venue else "",
            ),
        )
