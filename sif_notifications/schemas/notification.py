"""Pydantic models describing raw inbound notifications."""

from __future__ import annotations

from datetime import datetime, tzinfo
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from sif_notifications.domain.deep_links import is_valid_deep_link
from sif_notifications.domain.entities import (
    ActionStyle,
    Notification,
    NotificationAction,
    NotificationKind,
    NotificationPayload,
    NotificationPriority,
    NotificationState,
    default_actions_for,
)
from sif_notifications.utils import ensure_app_timezone

_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class NotificationActionSchema(BaseModel):
    """Action declared by the sender of a notification."""

    model_config = _CAMEL_CONFIG

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    icon_ref: str | None = None
    style: ActionStyle = ActionStyle.DEFAULT

    def to_entity(self) -> NotificationAction:
        return NotificationAction(
            id=self.id, title=self.title, icon_ref=self.icon_ref, style=self.style
        )


class NotificationPayloadSchema(BaseModel):
    """Structured payload attached to an inbound notification."""

    model_config = _CAMEL_CONFIG

    sif_id: str | None = None
    sender_id: str | None = None
    template_id: str | None = None
    chat_id: str | None = None
    deep_link: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("sif_id", "sender_id", "template_id", "chat_id")
    @classmethod
    def _reject_blank_identifiers(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("identifier must not be blank")
        return value

    @field_validator("deep_link")
    @classmethod
    def _validate_deep_link(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_deep_link(value):
            raise ValueError("unsupported deep link")
        return value

    def to_entity(self) -> NotificationPayload:
        return NotificationPayload(
            sif_id=self.sif_id,
            sender_id=self.sender_id,
            template_id=self.template_id,
            chat_id=self.chat_id,
            deep_link=self.deep_link,
            metadata=dict(self.metadata),
        )


class RawNotification(BaseModel):
    """Inbound notification as produced by push or in-app delivery.

    Both ``snake_case`` and ``camelCase`` keys are accepted; ``type`` and
    ``recipientUID`` are understood as aliases of ``kind`` and ``recipient_id``.
    """

    model_config = _CAMEL_CONFIG

    id: str | None = Field(default=None, min_length=1)
    recipient_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("recipient_id", "recipientId", "recipientUID"),
    )
    sender_id: str | None = Field(
        default=None, validation_alias=AliasChoices("sender_id", "senderId", "senderUID")
    )
    kind: NotificationKind = Field(..., validation_alias=AliasChoices("kind", "type"))
    title: str = Field(..., min_length=1, max_length=200)
    body: str = ""
    payload: NotificationPayloadSchema | None = None
    priority: NotificationPriority | None = None
    state: NotificationState = NotificationState.PENDING
    created_at: datetime | None = None
    scheduled_at: datetime | None = None
    actions: list[NotificationActionSchema] | None = None

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped

    @model_validator(mode="after")
    def _validate_schedule(self) -> "RawNotification":
        if (
            self.created_at is not None
            and self.scheduled_at is not None
            and _comparable(self.scheduled_at) < _comparable(self.created_at)
        ):
            raise ValueError("scheduled_at must not precede created_at")
        return self

    def to_entity(self, *, now: datetime, tz: tzinfo | None = None) -> Notification:
        """Return the domain :class:`Notification` described by this payload."""

        created_at = ensure_app_timezone(self.created_at, tz) or now
        if self.actions is None:
            actions = default_actions_for(self.kind)
        else:
            actions = tuple(action.to_entity() for action in self.actions)
        return Notification(
            id=self.id or uuid4().hex,
            recipient_id=self.recipient_id,
            sender_id=self.sender_id,
            kind=self.kind,
            title=self.title,
            body=self.body,
            payload=self.payload.to_entity() if self.payload else None,
            priority=self.priority or self.kind.default_priority,
            state=self.state,
            created_at=created_at,
            scheduled_at=ensure_app_timezone(self.scheduled_at, tz),
            actions=actions,
        )


def _comparable(value: datetime) -> datetime:
    return ensure_app_timezone(value)  # type: ignore[return-value]


__all__ = ["NotificationActionSchema", "NotificationPayloadSchema", "RawNotification"]
