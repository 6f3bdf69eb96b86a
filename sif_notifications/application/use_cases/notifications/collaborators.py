"""Narrow interfaces to the collaborators the engine depends on."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from sif_notifications.domain.entities import Notification, UserNotificationSettings


@dataclass(frozen=True)
class PageCursor:
    """Position after the last notification of a page (newest-first order)."""

    created_at: datetime
    notification_id: str

    @classmethod
    def after(cls, notification: Notification) -> "PageCursor":
        return cls(created_at=notification.created_at, notification_id=notification.id)


@runtime_checkable
class NotificationPersistence(Protocol):
    """Remote store of notifications and settings."""

    def load_page(self, cursor: PageCursor | None, limit: int) -> list[Notification]:
        """Return up to ``limit`` notifications older than ``cursor``, newest first."""

    def load_settings(self, uid: str) -> Mapping[str, Any] | None:
        """Return the raw persisted settings record of ``uid``."""

    def save_settings(self, settings: UserNotificationSettings) -> None:
        """Persist ``settings``; raise on failure."""


@runtime_checkable
class SettingsBackupStore(Protocol):
    """Snapshots of settings taken before destructive migrations."""

    def save_backup(self, uid: str, taken_at: datetime, record: Mapping[str, Any]) -> None:
        ...

    def latest_backup(self, uid: str) -> Mapping[str, Any] | None:
        ...


class ReplySender(Protocol):
    async def send(self, chat_id: str, text: str) -> None:
        """Send ``text`` to ``chat_id``; raise on failure."""


@dataclass(frozen=True)
class NavigationTarget:
    """Screen the UI should open for a notification."""

    route: str
    parameters: dict[str, str] = field(default_factory=dict)


class Navigator(Protocol):
    def resolve_deep_link(self, notification: Notification) -> NavigationTarget:
        ...


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"


class PushPermissions(Protocol):
    """OS permission and push-token source. The engine only reads from it."""

    async def request_permission(self) -> PermissionStatus:
        ...

    def current_token(self) -> str | None:
        ...


__all__ = [
    "NavigationTarget",
    "Navigator",
    "NotificationPersistence",
    "PageCursor",
    "PermissionStatus",
    "PushPermissions",
    "ReplySender",
    "SettingsBackupStore",
]
