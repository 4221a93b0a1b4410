"""Timezone resolution and instant parsing for catalogue and store data."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from dateutil import tz
from dateutil.parser import isoparse


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Resolve an IANA name or ``UTC`` into a tzinfo.

    Returns ``None`` for an empty name. Raises ``ValueError`` when the name is
    not a known zone.
    """
    if name is None or not name.strip():
        return None
    if name.strip().upper() in {"UTC", "Z", "GMT"}:
        return timezone.utc
    resolved = tz.gettz(name.strip())
    if resolved is None:
        raise ValueError(f"Unknown timezone: {name!r}")
    return resolved


def localize(value: datetime, default_tz: tzinfo | None = None) -> datetime:
    """Attach *default_tz* (UTC when unset) to a naive datetime.

    Aware datetimes are returned unchanged: their own offset wins.
    """
    if value.tzinfo is not None and value.utcoffset() is not None:
        return value
    return value.replace(tzinfo=default_tz or timezone.utc)


def parse_instant(value: str | datetime, default_tz: tzinfo | None = None) -> datetime:
    """Parse an ISO 8601 timestamp into an aware datetime."""
    if isinstance(value, datetime):
        return localize(value, default_tz)
    return localize(isoparse(value), default_tz)
