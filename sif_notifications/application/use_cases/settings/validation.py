"""Validation helpers for notification settings records."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import time
from typing import Any

from pydantic import ValidationError

from sif_notifications.domain.entities import UserNotificationSettings
from sif_notifications.domain.errors import ValidationFailedError
from sif_notifications.schemas import QUIET_HOURS_PATTERN, NotificationSettingsRecord

_QUIET_HOURS_RE = re.compile(QUIET_HOURS_PATTERN)


def is_valid_time_of_day(value: object) -> bool:
    """Return ``True`` when ``value`` is a 24-hour ``HH:MM`` string."""

    return isinstance(value, str) and _QUIET_HOURS_RE.match(value) is not None


def parse_time_of_day(value: str) -> time:
    if not is_valid_time_of_day(value):
        raise ValidationFailedError(["time"], f"'{value}' is not a valid HH:MM time")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def validate_settings_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``record`` normalized, or raise :class:`ValidationFailedError`.

    Every offending field is reported, not only the first one.
    """

    try:
        model = NotificationSettingsRecord.model_validate(dict(record))
    except ValidationError as exc:
        fields = [".".join(str(part) for part in error["loc"]) or "record" for error in exc.errors()]
        raise ValidationFailedError(fields) from exc
    return model.model_dump()


def validate_settings(settings: UserNotificationSettings) -> UserNotificationSettings:
    """Validate an in-memory settings object and return it unchanged."""

    validate_settings_record(settings.to_record())
    return settings


__all__ = [
    "is_valid_time_of_day",
    "parse_time_of_day",
    "validate_settings",
    "validate_settings_record",
]
