"""Domain entity holding a user's notification preferences."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Mapping

from .notification import NotificationCategory

CURRENT_SETTINGS_VERSION = 3

DEFAULT_QUIET_HOURS_START = "22:00"
DEFAULT_QUIET_HOURS_END = "08:00"

# Fields introduced by each schema version, with the default used to back-fill them.
SETTINGS_FIELDS_BY_VERSION: dict[int, dict[str, Any]] = {
    1: {
        "is_enabled": True,
        "sound_enabled": True,
        "badge_enabled": True,
        "quiet_hours_enabled": False,
        "quiet_hours_start": DEFAULT_QUIET_HOURS_START,
        "quiet_hours_end": DEFAULT_QUIET_HOURS_END,
    },
    2: {
        "sif_notifications_enabled": True,
        "social_notifications_enabled": True,
        "system_notifications_enabled": True,
    },
    3: {
        "template_notifications_enabled": True,
        "achievement_notifications_enabled": True,
    },
}

_CATEGORY_FLAGS = {
    NotificationCategory.SIF: "sif_notifications_enabled",
    NotificationCategory.SOCIAL: "social_notifications_enabled",
    NotificationCategory.SYSTEM: "system_notifications_enabled",
    NotificationCategory.TEMPLATE: "template_notifications_enabled",
    NotificationCategory.ACHIEVEMENT: "achievement_notifications_enabled",
}


@dataclass
class UserNotificationSettings:
    """Versioned notification preferences of a single user."""

    uid: str
    last_updated: datetime
    version: int = CURRENT_SETTINGS_VERSION
    is_enabled: bool = True
    sound_enabled: bool = True
    badge_enabled: bool = True
    sif_notifications_enabled: bool = True
    social_notifications_enabled: bool = True
    system_notifications_enabled: bool = True
    template_notifications_enabled: bool = True
    achievement_notifications_enabled: bool = True
    quiet_hours_enabled: bool = False
    quiet_hours_start: str = DEFAULT_QUIET_HOURS_START
    quiet_hours_end: str = DEFAULT_QUIET_HOURS_END
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def defaults(cls, uid: str, now: datetime) -> "UserNotificationSettings":
        """Return the safe default preferences for ``uid``."""

        return cls(uid=uid, last_updated=now)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserNotificationSettings":
        """Build settings from an already validated record.

        Keys that are not settings fields are kept in :attr:`extra`.
        """

        known = {item.name for item in fields(cls)} - {"extra"}
        values = {key: value for key, value in record.items() if key in known}
        extra = {
            key: value
            for key, value in record.items()
            if key not in known and key != "extra"
        }
        extra.update(record.get("extra") or {})
        return cls(**values, extra=extra)

    def to_record(self) -> dict[str, Any]:
        """Return the flat mapping persisted for these settings."""

        record = dict(self.extra)
        for item in fields(self):
            if item.name == "extra":
                continue
            record[item.name] = getattr(self, item.name)
        return record

    def is_category_enabled(self, category: NotificationCategory) -> bool:
        return bool(getattr(self, _CATEGORY_FLAGS[category]))


__all__ = [
    "CURRENT_SETTINGS_VERSION",
    "DEFAULT_QUIET_HOURS_END",
    "DEFAULT_QUIET_HOURS_START",
    "SETTINGS_FIELDS_BY_VERSION",
    "UserNotificationSettings",
]
