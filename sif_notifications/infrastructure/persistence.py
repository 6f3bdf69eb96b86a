"""SQLAlchemy implementation of the engine's persistence interfaces."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, tzinfo
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from sif_notifications.application.use_cases.notifications.collaborators import PageCursor
from sif_notifications.domain.entities import Notification, UserNotificationSettings

from .database import make_session_factory
from .repositories import NotificationRepository, SettingsRepository


class SqlAlchemyNotificationPersistence:
    """Open one short-lived session per call.

    Calls arrive from anyio worker threads, so sessions are never shared.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        *,
        recipient_id: str | None = None,
        backup_limit: int | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._session_factory = session_factory or make_session_factory()
        self._recipient_id = recipient_id
        self._backup_limit = backup_limit
        self._tz = tz

    def _notifications(self, session: Session) -> NotificationRepository:
        return NotificationRepository(session, recipient_id=self._recipient_id, tz=self._tz)

    def _settings(self, session: Session) -> SettingsRepository:
        return SettingsRepository(session, backup_limit=self._backup_limit, tz=self._tz)

    def load_page(self, cursor: PageCursor | None, limit: int) -> list[Notification]:
        with self._session_factory() as session:
            return self._notifications(session).load_page(cursor, limit)

    def save_notification(self, notification: Notification) -> Notification:
        with self._session_factory() as session:
            repository = self._notifications(session)
            if repository.get(notification.id) is None:
                return repository.create(notification)
            return repository.update(notification)

    def delete_notification(self, notification_id: str) -> bool:
        with self._session_factory() as session:
            return self._notifications(session).delete(notification_id)

    def load_settings(self, uid: str) -> dict[str, Any] | None:
        with self._session_factory() as session:
            return self._settings(session).load_settings(uid)

    def save_settings(self, settings: UserNotificationSettings) -> None:
        with self._session_factory() as session:
            self._settings(session).save_settings(settings)

    def save_backup(self, uid: str, taken_at: datetime, record: Mapping[str, Any]) -> None:
        with self._session_factory() as session:
            self._settings(session).save_backup(uid, taken_at, record)

    def latest_backup(self, uid: str) -> dict[str, Any] | None:
        with self._session_factory() as session:
            return self._settings(session).latest_backup(uid)


__all__ = ["SqlAlchemyNotificationPersistence"]
