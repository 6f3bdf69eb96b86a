"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sif_notifications.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable (via
    the ``Settings`` model). Values such as ``UTC-05:00`` are accepted as fixed
    offsets. Anything that cannot be resolved falls back to ``UTC``.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def reset_app_timezone_cache() -> None:
    """Forget the cached timezone so the next lookup re-reads the settings."""

    get_app_timezone.cache_clear()


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(
    value: datetime | None, tz: tzinfo | None = None
) -> datetime | None:
    """Normalize ``value`` so it is expressed in ``tz`` (the app timezone by default).

    Naive values are assumed to already be wall-clock times in that timezone.
    """

    if value is None:
        return None

    target = tz or get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=target)
    return value.astimezone(target)


def ensure_app_naive_datetime(
    value: datetime | None, tz: tzinfo | None = None
) -> datetime | None:
    """Return ``value`` localized to ``tz`` but without ``tzinfo``.

    SQLite ``DATETIME`` columns drop the offset, so the localized wall-clock
    value is what gets stored. Read it back with :func:`ensure_app_timezone`.
    """

    localized = ensure_app_timezone(value, tz)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)


def local_date(value: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar date of ``value`` in ``tz``."""

    localized = ensure_app_timezone(value, tz)
    assert localized is not None
    return localized.date()


def local_time(value: datetime, tz: tzinfo | None = None) -> time:
    """Return the wall-clock time of ``value`` in ``tz``."""

    localized = ensure_app_timezone(value, tz)
    assert localized is not None
    return localized.time()


def _resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``timezone`` instance."""

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    return timezone.utc
