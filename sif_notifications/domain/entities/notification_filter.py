"""Value types used to derive notification list views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .notification import (
    Notification,
    NotificationCategory,
    NotificationPriority,
    NotificationState,
)


class FilterKind(str, Enum):
    """Discriminator of :class:`NotificationFilter`."""

    ALL = "all"
    UNREAD = "unread"
    READ = "read"
    ARCHIVED = "archived"
    FAILED = "failed"
    SCHEDULED = "scheduled"
    CATEGORY = "category"
    PRIORITY = "priority"


@dataclass(frozen=True)
class NotificationFilter:
    """The single active filter of a list view.

    Build instances through the class methods; ``category`` and ``priority``
    carry their argument, every other kind carries none.
    """

    kind: FilterKind = FilterKind.ALL
    category: NotificationCategory | None = None
    priority: NotificationPriority | None = None

    def __post_init__(self) -> None:
        if (self.kind is FilterKind.CATEGORY) != (self.category is not None):
            raise ValueError("category filters require exactly one category")
        if (self.kind is FilterKind.PRIORITY) != (self.priority is not None):
            raise ValueError("priority filters require exactly one priority")

    @classmethod
    def all(cls) -> "NotificationFilter":
        return cls(FilterKind.ALL)

    @classmethod
    def unread(cls) -> "NotificationFilter":
        return cls(FilterKind.UNREAD)

    @classmethod
    def read(cls) -> "NotificationFilter":
        return cls(FilterKind.READ)

    @classmethod
    def archived(cls) -> "NotificationFilter":
        return cls(FilterKind.ARCHIVED)

    @classmethod
    def failed(cls) -> "NotificationFilter":
        return cls(FilterKind.FAILED)

    @classmethod
    def scheduled(cls) -> "NotificationFilter":
        return cls(FilterKind.SCHEDULED)

    @classmethod
    def for_category(cls, category: NotificationCategory) -> "NotificationFilter":
        return cls(FilterKind.CATEGORY, category=category)

    @classmethod
    def for_priority(cls, priority: NotificationPriority) -> "NotificationFilter":
        return cls(FilterKind.PRIORITY, priority=priority)

    @property
    def display_name(self) -> str:
        if self.category is not None:
            return self.category.display_name
        if self.priority is not None:
            return self.priority.display_name
        return self.kind.value.capitalize()

    def matches(self, notification: Notification, now: datetime) -> bool:
        """Return ``True`` when ``notification`` belongs to this filter at ``now``."""

        archived = notification.state is NotificationState.ARCHIVED
        kind = self.kind
        if kind is FilterKind.ALL:
            return not archived
        if kind is FilterKind.UNREAD:
            return notification.is_unread
        if kind is FilterKind.READ:
            return notification.state is NotificationState.READ
        if kind is FilterKind.ARCHIVED:
            return archived
        if kind is FilterKind.FAILED:
            return notification.state is NotificationState.FAILED
        if kind is FilterKind.SCHEDULED:
            return notification.is_scheduled(now)
        if kind is FilterKind.CATEGORY:
            return not archived and notification.category is self.category
        return not archived and notification.priority is self.priority


@dataclass(frozen=True)
class NotificationGroup:
    """Date bucket of a list view. Derived, never persisted."""

    label: str
    notifications: tuple[Notification, ...]
    unread_count: int

    @property
    def summary(self) -> str:
        total = len(self.notifications)
        if self.unread_count == 0:
            return "1 notification" if total == 1 else f"{total} notifications"
        if self.unread_count == total:
            if total == 1:
                return "1 new notification"
            return f"{total} new notifications"
        return f"{self.unread_count} new, {total} total"


__all__ = ["FilterKind", "NotificationFilter", "NotificationGroup"]
