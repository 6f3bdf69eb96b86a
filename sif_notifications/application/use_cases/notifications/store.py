"""Process-wide, single-writer store of the active user's notifications."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from sif_notifications.domain.entities import Notification
from sif_notifications.domain.errors import DuplicateIdError, NotFoundError
from sif_notifications.domain.lifecycle import Transition

logger = logging.getLogger(__name__)


class StoreChangeKind(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    CLEARED = "cleared"


@dataclass(frozen=True)
class StoreChange:
    """Event emitted after every successful store mutation."""

    kind: StoreChangeKind
    notification_id: str | None = None
    notification: Notification | None = None


StoreListener = Callable[[StoreChange], None]


def _newest_first_key(notification: Notification) -> tuple:
    return (-notification.created_at.timestamp(), notification.id)


class NotificationSnapshot:
    """Immutable, restartable view of the store at one point in time.

    Iteration yields notifications newest-first by ``created_at`` (ties broken
    by ``id``). Sorting happens lazily on the first iteration.
    """

    def __init__(self, items: Mapping[str, Notification]) -> None:
        self._items = items
        self._ordered: tuple[Notification, ...] | None = None

    def __iter__(self) -> Iterator[Notification]:
        if self._ordered is None:
            self._ordered = tuple(sorted(self._items.values(), key=_newest_first_key))
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def get(self, notification_id: str) -> Notification | None:
        return self._items.get(notification_id)


class NotificationStore:
    """Single owner and exclusive writer of in-memory notifications.

    Writers serialize on one re-entrant lock. The backing mapping is replaced
    on every write (copy-on-write) so readers always observe a whole snapshot
    without taking the lock.
    """

    def __init__(self, notifications: Iterable[Notification] = ()) -> None:
        self._lock = threading.RLock()
        self._items: Mapping[str, Notification] = MappingProxyType({})
        self._unread = 0
        self._listeners: list[StoreListener] = []
        for notification in notifications:
            self.add(notification)

    # Queries -----------------------------------------------------------

    def get(self, notification_id: str) -> Notification:
        notification = self._items.get(notification_id)
        if notification is None:
            raise NotFoundError(notification_id)
        return notification

    def all(self) -> NotificationSnapshot:
        return NotificationSnapshot(self._items)

    def unread_count(self) -> int:
        return self._unread

    def ids(self) -> frozenset[str]:
        return frozenset(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    # Mutations ---------------------------------------------------------

    def add(self, notification: Notification) -> Notification:
        with self._lock:
            if notification.id in self._items:
                raise DuplicateIdError(notification.id)
            self._replace_items({**self._items, notification.id: notification})
            self._unread += int(notification.is_unread)
            self._emit(StoreChange(StoreChangeKind.ADDED, notification.id, notification))
        return notification

    def update(self, notification_id: str, mutation: Transition) -> Notification:
        """Apply ``mutation`` to the stored notification and swap in the result.

        Errors raised by ``mutation`` propagate and leave the store untouched.
        A mutation returning an identical value is a successful no-op and does
        not emit a change event.
        """

        with self._lock:
            current = self.get(notification_id)
            updated = mutation(current)
            if updated.id != current.id:
                raise ValueError("Store mutations must not change the notification id")
            if updated == current:
                return current
            self._replace_items({**self._items, notification_id: updated})
            self._unread += int(updated.is_unread) - int(current.is_unread)
            self._emit(StoreChange(StoreChangeKind.UPDATED, notification_id, updated))
        return updated

    def remove(self, notification_id: str) -> bool:
        """Delete ``notification_id``; returns ``False`` when it was already absent."""

        with self._lock:
            current = self._items.get(notification_id)
            if current is None:
                return False
            remaining = dict(self._items)
            del remaining[notification_id]
            self._replace_items(remaining)
            self._unread -= int(current.is_unread)
            self._emit(StoreChange(StoreChangeKind.REMOVED, notification_id, current))
        return True

    def clear(self) -> None:
        with self._lock:
            self._replace_items({})
            self._unread = 0
            self._emit(StoreChange(StoreChangeKind.CLEARED))

    # Change events -----------------------------------------------------

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _replace_items(self, items: dict[str, Notification]) -> None:
        self._items = MappingProxyType(items)

    def _emit(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(
                    "Store listener %r failed handling %s change", listener, change.kind.value
                )


__all__ = [
    "NotificationSnapshot",
    "NotificationStore",
    "StoreChange",
    "StoreChangeKind",
    "StoreListener",
]
