"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, JSON, String, Text

from sif_notifications.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
    )

    id = Column(String(64), primary_key=True)
    recipient_id = Column(String(128), nullable=False, index=True)
    sender_id = Column(String(128), nullable=True)
    kind = Column(String(40), nullable=False)
    priority = Column(String(20), nullable=False)
    state = Column(String(20), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    payload = Column(JSON, nullable=True)
    actions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(), nullable=False)
    scheduled_at = Column(DateTime(), nullable=True)
    failure_reason = Column(Text, nullable=True)
    presentation_suppressed = Column(Boolean, nullable=False, default=False)
    play_sound = Column(Boolean, nullable=False, default=False)
    show_badge = Column(Boolean, nullable=False, default=False)


__all__ = ["NotificationModel"]
