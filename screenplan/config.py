"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from datetime import tzinfo
from pathlib import Path

from pydantic import BaseModel, field_validator

from screenplan.services.clock import resolve_timezone

DEFAULT_DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseModel):
    data_dir: Path = DEFAULT_DATA_DIR
    store_path: Path | None = None
    timezone: str | None = None
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        resolve_timezone(value)
        return value or None

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def tz(self) -> tzinfo | None:
        return resolve_timezone(self.timezone)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from ``SCREENPLAN_*`` variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field in ("data_dir", "store_path", "timezone", "log_level"):
            raw = env.get(f"SCREENPLAN_{field.upper()}")
            if raw:
                values[field] = raw
        return cls(**values)
