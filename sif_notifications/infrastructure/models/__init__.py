"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .notification_settings import NotificationSettingsBackupModel, NotificationSettingsModel

__all__ = [
    "NotificationModel",
    "NotificationSettingsBackupModel",
    "NotificationSettingsModel",
]
