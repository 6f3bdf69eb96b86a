"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import tzinfo
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from sif_notifications.application.use_cases.notifications.collaborators import PageCursor
from sif_notifications.domain.entities import (
    ActionStyle,
    Notification,
    NotificationAction,
    NotificationKind,
    NotificationPayload,
    NotificationPriority,
    NotificationState,
)
from sif_notifications.domain.errors import DuplicateIdError, NotFoundError
from sif_notifications.infrastructure.models import NotificationModel
from sif_notifications.utils import ensure_app_naive_datetime, ensure_app_timezone


class NotificationRepository:
    """Provide CRUD operations and newest-first paging for :class:`Notification` objects."""

    def __init__(
        self,
        session: Session,
        *,
        recipient_id: str | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.session = session
        self.recipient_id = recipient_id
        self.tz = tz

    def load_page(self, cursor: PageCursor | None, limit: int) -> list[Notification]:
        query = self.session.query(NotificationModel)
        if self.recipient_id is not None:
            query = query.filter(NotificationModel.recipient_id == self.recipient_id)
        if cursor is not None:
            created_at = ensure_app_naive_datetime(cursor.created_at, self.tz)
            query = query.filter(
                or_(
                    NotificationModel.created_at < created_at,
                    and_(
                        NotificationModel.created_at == created_at,
                        NotificationModel.id > cursor.notification_id,
                    ),
                )
            )
        query = query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.asc())
        return [self._to_entity(model) for model in query.limit(limit).all()]

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model is not None else None

    def create(self, notification: Notification) -> Notification:
        if self.session.get(NotificationModel, notification.id) is not None:
            raise DuplicateIdError(notification.id)
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            raise NotFoundError(notification.id)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, notification_id: str) -> bool:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def _apply_entity_to_model(self, model: NotificationModel, notification: Notification) -> None:
        model.id = notification.id
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.kind = notification.kind.value
        model.priority = notification.priority.value
        model.state = notification.state.value
        model.title = notification.title
        model.body = notification.body
        model.payload = notification.payload.to_dict() if notification.payload else None
        model.actions = [
            {
                "id": action.id,
                "title": action.title,
                "icon_ref": action.icon_ref,
                "style": action.style.value,
            }
            for action in notification.actions
        ]
        model.created_at = ensure_app_naive_datetime(notification.created_at, self.tz)
        model.scheduled_at = ensure_app_naive_datetime(notification.scheduled_at, self.tz)
        model.failure_reason = notification.failure_reason
        model.presentation_suppressed = notification.presentation_suppressed
        model.play_sound = notification.play_sound
        model.show_badge = notification.show_badge

    def _to_entity(self, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            kind=NotificationKind(model.kind),
            priority=NotificationPriority(model.priority),
            state=NotificationState(model.state),
            title=model.title,
            body=model.body,
            payload=_payload_from_dict(model.payload),
            actions=tuple(_action_from_dict(item) for item in model.actions or ()),
            created_at=ensure_app_timezone(model.created_at, self.tz),
            scheduled_at=ensure_app_timezone(model.scheduled_at, self.tz),
            failure_reason=model.failure_reason,
            presentation_suppressed=bool(model.presentation_suppressed),
            play_sound=bool(model.play_sound),
            show_badge=bool(model.show_badge),
        )


def _payload_from_dict(data: Mapping[str, Any] | None) -> NotificationPayload | None:
    if not data:
        return None
    return NotificationPayload(
        sif_id=data.get("sif_id"),
        sender_id=data.get("sender_id"),
        template_id=data.get("template_id"),
        chat_id=data.get("chat_id"),
        deep_link=data.get("deep_link"),
        metadata=dict(data.get("metadata") or {}),
    )


def _action_from_dict(data: Mapping[str, Any]) -> NotificationAction:
    return NotificationAction(
        id=data["id"],
        title=data["title"],
        icon_ref=data.get("icon_ref"),
        style=ActionStyle(data.get("style", ActionStyle.DEFAULT.value)),
    )


__all__ = ["NotificationRepository"]
