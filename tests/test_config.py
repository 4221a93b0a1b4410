"""Tests for environment-driven settings and logging setup."""

from __future__ import annotations

import logging
from datetime import timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from screenplan.config import DEFAULT_DATA_DIR, Settings
from screenplan.logging_setup import configure_logging
from screenplan.services.clock import localize, parse_instant, resolve_timezone


def test_defaults_when_environment_is_empty():
    settings = Settings.from_env({})

    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.store_path is None
    assert settings.tz is None
    assert settings.log_level == "INFO"


def test_reads_prefixed_variables():
    settings = Settings.from_env(
        {
            "SCREENPLAN_DATA_DIR": "/srv/festival",
            "SCREENPLAN_STORE_PATH": "/tmp/selections.json",
            "SCREENPLAN_TIMEZONE": "Asia/Hong_Kong",
            "SCREENPLAN_LOG_LEVEL": "debug",
        }
    )

    assert settings.data_dir == Path("/srv/festival")
    assert settings.store_path == Path("/tmp/selections.json")
    assert settings.tz is not None
    assert settings.log_level == "DEBUG"


def test_unknown_timezone_is_rejected():
    with pytest.raises(ValidationError):
        Settings.from_env({"SCREENPLAN_TIMEZONE": "Mars/Olympus_Mons"})


def test_resolve_timezone_utc_aliases():
    assert resolve_timezone("utc") is timezone.utc
    assert resolve_timezone("") is None


def test_parse_instant_keeps_explicit_offset():
    value = parse_instant("2025-03-15T14:00:00+08:00", default_tz=timezone.utc)

    assert value.utcoffset() == timedelta(hours=8)


def test_localize_naive_defaults_to_utc():
    value = parse_instant("2025-03-15T14:00:00")

    assert value.tzinfo is timezone.utc
    assert localize(value, timezone(timedelta(hours=8))) is value


def test_configure_logging_is_idempotent():
    logger = configure_logging("debug")
    configure_logging("debug")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    configure_logging(logging.INFO)
