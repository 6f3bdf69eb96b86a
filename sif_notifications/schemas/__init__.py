"""Pydantic schemas for data crossing the engine boundary."""

from .notification import (
    NotificationActionSchema,
    NotificationPayloadSchema,
    RawNotification,
)
from .settings import QUIET_HOURS_PATTERN, NotificationSettingsRecord

__all__ = [
    "NotificationActionSchema",
    "NotificationPayloadSchema",
    "NotificationSettingsRecord",
    "QUIET_HOURS_PATTERN",
    "RawNotification",
]
