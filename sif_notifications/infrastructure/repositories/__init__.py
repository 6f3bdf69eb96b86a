"""Repositories backed by SQLAlchemy sessions."""

from .notification_repository import NotificationRepository
from .settings_repository import SettingsRepository

__all__ = ["NotificationRepository", "SettingsRepository"]
