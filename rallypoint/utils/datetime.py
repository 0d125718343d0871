"""Helpers for converting between aware domain datetimes and stored values."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rallypoint.config import get_settings

_FALLBACK_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the timezone configured through ``APP_TIMEZONE``.

    Accepts IANA names (``America/New_York``) and fixed offsets written as
    ``UTC+05:30``. Anything unresolvable falls back to UTC.
    """

    name = (get_settings().app_timezone or "").strip() or _FALLBACK_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        offset = _parse_offset(name)
        return offset if offset is not None else timezone.utc


def now_in_app_timezone() -> datetime:
    """Return the current aware time in the application timezone."""

    return datetime.now(tz=get_app_timezone())


def to_storage(value: datetime | None) -> datetime | None:
    """Convert ``value`` to the naive application-local form kept in the DB."""

    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(get_app_timezone())
    return value.replace(tzinfo=None)


def from_storage(value: datetime | None) -> datetime | None:
    """Attach the application timezone to a naive value read from the DB."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def storage_now() -> datetime:
    """Column default: the current time in storage form."""

    stored = to_storage(now_in_app_timezone())
    if stored is None:
        raise RuntimeError("Failed to compute the storage datetime")
    return stored


def _parse_offset(name: str) -> tzinfo | None:
    match = _OFFSET_PATTERN.match(name)
    if not match:
        return None
    sign = -1 if match.group("sign") == "-" else 1
    delta = timedelta(
        hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
    )
    return timezone(sign * delta)
