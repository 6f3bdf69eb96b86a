"""Domain entities describing an in-app notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

DEEP_LINK_SCHEME = "isayitforward"


class NotificationCategory(str, Enum):
    """Coarse grouping of notification kinds."""

    SIF = "sif"
    SOCIAL = "social"
    SYSTEM = "system"
    TEMPLATE = "template"
    ACHIEVEMENT = "achievement"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES = {
    NotificationCategory.SIF: "SIF",
    NotificationCategory.SOCIAL: "Social",
    NotificationCategory.SYSTEM: "System",
    NotificationCategory.TEMPLATE: "Templates",
    NotificationCategory.ACHIEVEMENT: "Achievements",
}


class NotificationPriority(str, Enum):
    """Delivery priority, ordered from ``LOW`` to ``CRITICAL``."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_ORDER = (
    NotificationPriority.LOW,
    NotificationPriority.NORMAL,
    NotificationPriority.HIGH,
    NotificationPriority.CRITICAL,
)


class NotificationKind(str, Enum):
    """Specific notification type; each kind belongs to one category."""

    SIF_RECEIVED = "sif_received"
    SIF_DELIVERED = "sif_delivered"
    SIF_SCHEDULED = "sif_scheduled"
    SIF_REMINDER = "sif_reminder"
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPTED = "friend_accepted"
    MESSAGE_RECEIVED = "message_received"
    SYSTEM_UPDATE = "system_update"
    ACCOUNT_UPDATE = "account_update"
    SECURITY_ALERT = "security_alert"
    TEMPLATE_SHARED = "template_shared"
    TEMPLATE_UPDATED = "template_updated"
    ACHIEVEMENT = "achievement"
    MILESTONE = "milestone"

    @property
    def display_name(self) -> str:
        return _KIND_DETAILS[self][0]

    @property
    def icon(self) -> str:
        return _KIND_DETAILS[self][1]

    @property
    def category(self) -> NotificationCategory:
        return _KIND_DETAILS[self][2]

    @property
    def default_priority(self) -> NotificationPriority:
        return _KIND_DETAILS[self][3]


_KIND_DETAILS: dict[
    NotificationKind,
    tuple[str, str, NotificationCategory, NotificationPriority],
] = {
    NotificationKind.SIF_RECEIVED: (
        "SIF Received", "envelope.fill", NotificationCategory.SIF, NotificationPriority.HIGH
    ),
    NotificationKind.SIF_DELIVERED: (
        "SIF Delivered", "checkmark.circle.fill", NotificationCategory.SIF, NotificationPriority.NORMAL
    ),
    NotificationKind.SIF_SCHEDULED: (
        "SIF Scheduled", "calendar", NotificationCategory.SIF, NotificationPriority.LOW
    ),
    NotificationKind.SIF_REMINDER: (
        "SIF Reminder", "bell.fill", NotificationCategory.SIF, NotificationPriority.NORMAL
    ),
    NotificationKind.FRIEND_REQUEST: (
        "Friend Request", "person.badge.plus", NotificationCategory.SOCIAL, NotificationPriority.HIGH
    ),
    NotificationKind.FRIEND_ACCEPTED: (
        "Friend Accepted", "person.2.fill", NotificationCategory.SOCIAL, NotificationPriority.NORMAL
    ),
    NotificationKind.MESSAGE_RECEIVED: (
        "Message Received", "message.fill", NotificationCategory.SOCIAL, NotificationPriority.HIGH
    ),
    NotificationKind.SYSTEM_UPDATE: (
        "System Update", "gear", NotificationCategory.SYSTEM, NotificationPriority.LOW
    ),
    NotificationKind.ACCOUNT_UPDATE: (
        "Account Update", "person.circle.fill", NotificationCategory.SYSTEM, NotificationPriority.LOW
    ),
    NotificationKind.SECURITY_ALERT: (
        "Security Alert",
        "exclamationmark.shield.fill",
        NotificationCategory.SYSTEM,
        NotificationPriority.CRITICAL,
    ),
    NotificationKind.TEMPLATE_SHARED: (
        "Template Shared", "doc.on.doc", NotificationCategory.TEMPLATE, NotificationPriority.LOW
    ),
    NotificationKind.TEMPLATE_UPDATED: (
        "Template Updated", "doc.badge.plus", NotificationCategory.TEMPLATE, NotificationPriority.LOW
    ),
    NotificationKind.ACHIEVEMENT: (
        "Achievement", "star.fill", NotificationCategory.ACHIEVEMENT, NotificationPriority.LOW
    ),
    NotificationKind.MILESTONE: (
        "Milestone", "flag.fill", NotificationCategory.ACHIEVEMENT, NotificationPriority.LOW
    ),
}


class NotificationState(str, Enum):
    """Lifecycle state of a notification."""

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ActionStyle(str, Enum):
    """Presentation style of a notification action."""

    PRIMARY = "primary"
    DESTRUCTIVE = "destructive"
    DEFAULT = "default"
    CANCEL = "cancel"


@dataclass(frozen=True)
class NotificationAction:
    """Capability offered by a notification (not an outcome)."""

    id: str
    title: str
    icon_ref: str | None = None
    style: ActionStyle = ActionStyle.DEFAULT


class PredefinedActions:
    """Catalog of the actions attached to notifications by default."""

    REPLY = NotificationAction("reply", "Reply", "arrowshape.turn.up.left.fill", ActionStyle.PRIMARY)
    ACCEPT = NotificationAction("accept", "Accept", "checkmark.circle.fill", ActionStyle.PRIMARY)
    DECLINE = NotificationAction("decline", "Decline", "xmark.circle.fill", ActionStyle.DESTRUCTIVE)
    VIEW = NotificationAction("view", "View", "eye.fill", ActionStyle.DEFAULT)
    DELETE = NotificationAction("delete", "Delete", "trash.fill", ActionStyle.DESTRUCTIVE)
    ARCHIVE = NotificationAction("archive", "Archive", "archivebox.fill", ActionStyle.DEFAULT)
    DISMISS = NotificationAction("dismiss", "Dismiss", "xmark", ActionStyle.CANCEL)
    OPEN_SIF = NotificationAction("open_sif", "Open SIF", "envelope.open.fill", ActionStyle.PRIMARY)
    SHARE = NotificationAction("share", "Share", "square.and.arrow.up.fill", ActionStyle.DEFAULT)
    OPEN_PROFILE = NotificationAction("open_profile", "View Profile", "person.circle.fill", ActionStyle.DEFAULT)
    OPEN_CHAT = NotificationAction("open_chat", "Open Chat", "message.fill", ActionStyle.PRIMARY)
    OPEN_TEMPLATE = NotificationAction("open_template", "View Template", "doc.fill", ActionStyle.PRIMARY)


def default_actions_for(kind: NotificationKind) -> tuple[NotificationAction, ...]:
    """Return the actions offered for ``kind`` when none are declared."""

    if kind is NotificationKind.SIF_RECEIVED:
        return (PredefinedActions.OPEN_SIF, PredefinedActions.REPLY, PredefinedActions.ARCHIVE)
    if kind is NotificationKind.FRIEND_REQUEST:
        return (PredefinedActions.ACCEPT, PredefinedActions.DECLINE, PredefinedActions.OPEN_PROFILE)
    if kind is NotificationKind.MESSAGE_RECEIVED:
        return (PredefinedActions.REPLY, PredefinedActions.OPEN_CHAT, PredefinedActions.ARCHIVE)
    if kind is NotificationKind.TEMPLATE_SHARED:
        return (PredefinedActions.OPEN_TEMPLATE, PredefinedActions.SHARE, PredefinedActions.DISMISS)
    if kind in (NotificationKind.ACHIEVEMENT, NotificationKind.MILESTONE):
        return (PredefinedActions.VIEW, PredefinedActions.SHARE, PredefinedActions.DISMISS)
    return (PredefinedActions.VIEW, PredefinedActions.DISMISS)


@dataclass(frozen=True)
class NotificationPayload:
    """Structured data attached to a notification."""

    sif_id: str | None = None
    sender_id: str | None = None
    template_id: str | None = None
    chat_id: str | None = None
    deep_link: str | None = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def for_sif(cls, sif_id: str, sender_id: str) -> "NotificationPayload":
        return cls(sif_id=sif_id, sender_id=sender_id, deep_link=_deep_link("sif", sif_id))

    @classmethod
    def for_friend_request(cls, sender_id: str) -> "NotificationPayload":
        return cls(sender_id=sender_id, deep_link=_deep_link("profile", sender_id))

    @classmethod
    def for_message(cls, chat_id: str, sender_id: str) -> "NotificationPayload":
        return cls(sender_id=sender_id, chat_id=chat_id, deep_link=_deep_link("chat", chat_id))

    @classmethod
    def for_template(
        cls, template_id: str, sender_id: str | None = None
    ) -> "NotificationPayload":
        return cls(
            sender_id=sender_id,
            template_id=template_id,
            deep_link=_deep_link("template", template_id),
        )

    @classmethod
    def for_achievement(
        cls, achievement_id: str, metadata: Mapping[str, str] | None = None
    ) -> "NotificationPayload":
        return cls(
            deep_link=_deep_link("achievement", achievement_id),
            metadata=dict(metadata or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sif_id": self.sif_id,
            "sender_id": self.sender_id,
            "template_id": self.template_id,
            "chat_id": self.chat_id,
            "deep_link": self.deep_link,
            "metadata": dict(self.metadata),
        }


def _deep_link(host: str, identifier: str) -> str:
    return f"{DEEP_LINK_SCHEME}://{host}/{identifier}"


_READ_STATES = frozenset({NotificationState.READ, NotificationState.ARCHIVED})


@dataclass(frozen=True)
class Notification:
    """Message delivered to a user's notification center.

    Instances are immutable: lifecycle changes produce a new value (see
    :mod:`sif_notifications.domain.lifecycle`) which the store swaps in.
    """

    id: str
    recipient_id: str
    kind: NotificationKind
    title: str
    body: str
    created_at: datetime
    priority: NotificationPriority = NotificationPriority.NORMAL
    state: NotificationState = NotificationState.PENDING
    payload: NotificationPayload | None = None
    scheduled_at: datetime | None = None
    actions: tuple[NotificationAction, ...] = ()
    sender_id: str | None = None
    failure_reason: str | None = None
    presentation_suppressed: bool = False
    play_sound: bool = False
    show_badge: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Notification id is required")
        if self.created_at.utcoffset() is None:
            raise ValueError("created_at must be timezone-aware")
        if self.scheduled_at is not None and self.scheduled_at.utcoffset() is None:
            raise ValueError("scheduled_at must be timezone-aware")
        if self.scheduled_at is not None and self.scheduled_at < self.created_at:
            raise ValueError("scheduled_at must not precede created_at")
        if not isinstance(self.actions, tuple):
            object.__setattr__(self, "actions", tuple(self.actions))

    @property
    def category(self) -> NotificationCategory:
        return self.kind.category

    @property
    def is_read(self) -> bool:
        return self.state in _READ_STATES

    @property
    def is_unread(self) -> bool:
        return not self.is_read

    def is_scheduled(self, now: datetime) -> bool:
        """Return ``True`` while delivery is still in the future."""

        return self.scheduled_at is not None and self.scheduled_at > now

    def is_overdue(self, now: datetime) -> bool:
        """Return ``True`` when the scheduled time passed but nothing was sent."""

        return (
            self.scheduled_at is not None
            and self.scheduled_at <= now
            and self.state is NotificationState.PENDING
        )

    def find_action(self, action_id: str) -> NotificationAction | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


__all__ = [
    "ActionStyle",
    "DEEP_LINK_SCHEME",
    "Notification",
    "NotificationAction",
    "NotificationCategory",
    "NotificationKind",
    "NotificationPayload",
    "NotificationPriority",
    "NotificationState",
    "PredefinedActions",
    "default_actions_for",
]
