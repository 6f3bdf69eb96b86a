"""SQLAlchemy models for notification settings and their backups."""

from sqlalchemy import Column, DateTime, Integer, JSON, String

from sif_notifications.infrastructure.database import Base


class NotificationSettingsModel(Base):
    """Latest settings record of a user, stored as a JSON document."""

    __tablename__ = "notification_settings"

    uid = Column(String(128), primary_key=True)
    version = Column(Integer, nullable=False)
    record = Column(JSON, nullable=False)
    last_updated = Column(DateTime(), nullable=False)


class NotificationSettingsBackupModel(Base):
    __tablename__ = "notification_settings_backup"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(String(128), nullable=False, index=True)
    taken_at = Column(DateTime(), nullable=False)
    record = Column(JSON, nullable=False)


__all__ = ["NotificationSettingsBackupModel", "NotificationSettingsModel"]
