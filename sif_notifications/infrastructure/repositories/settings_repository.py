"""Persistence helpers for notification settings and their backups."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, tzinfo
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from sif_notifications.config import get_settings
from sif_notifications.domain.entities import UserNotificationSettings
from sif_notifications.infrastructure.models import (
    NotificationSettingsBackupModel,
    NotificationSettingsModel,
)
from sif_notifications.utils import ensure_app_naive_datetime

_RECORD_ADAPTER = TypeAdapter(dict[str, Any])


def _to_json_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``record`` with datetimes and enums converted to JSON values."""

    return _RECORD_ADAPTER.dump_python(dict(record), mode="json")


class SettingsRepository:
    """Store settings records as JSON documents keyed by user id."""

    def __init__(
        self,
        session: Session,
        *,
        backup_limit: int | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.session = session
        self.backup_limit = backup_limit or get_settings().settings_backup_limit
        self.tz = tz

    def load_settings(self, uid: str) -> dict[str, Any] | None:
        """Return the raw record of ``uid`` exactly as stored, or ``None``."""

        model = self.session.get(NotificationSettingsModel, uid)
        if model is None:
            return None
        return dict(model.record or {})

    def save_settings(self, settings: UserNotificationSettings) -> None:
        model = self.session.get(NotificationSettingsModel, settings.uid)
        if model is None:
            model = NotificationSettingsModel(uid=settings.uid)
        model.version = settings.version
        model.record = _to_json_record(settings.to_record())
        model.last_updated = ensure_app_naive_datetime(settings.last_updated, self.tz)
        self.session.add(model)
        self.session.commit()

    def save_backup(self, uid: str, taken_at: datetime, record: Mapping[str, Any]) -> None:
        self.session.add(
            NotificationSettingsBackupModel(
                uid=uid,
                taken_at=ensure_app_naive_datetime(taken_at, self.tz),
                record=_to_json_record(record),
            )
        )
        self.session.flush()
        stale = (
            self.session.query(NotificationSettingsBackupModel)
            .filter(NotificationSettingsBackupModel.uid == uid)
            .order_by(
                NotificationSettingsBackupModel.taken_at.desc(),
                NotificationSettingsBackupModel.id.desc(),
            )
            .offset(self.backup_limit)
            .all()
        )
        for model in stale:
            self.session.delete(model)
        self.session.commit()

    def latest_backup(self, uid: str) -> dict[str, Any] | None:
        model = (
            self.session.query(NotificationSettingsBackupModel)
            .filter(NotificationSettingsBackupModel.uid == uid)
            .order_by(
                NotificationSettingsBackupModel.taken_at.desc(),
                NotificationSettingsBackupModel.id.desc(),
            )
            .first()
        )
        return dict(model.record) if model is not None else None


__all__ = ["SettingsRepository"]
