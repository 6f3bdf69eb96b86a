"""Release scheduled notifications once their delivery time has passed."""

from __future__ import annotations

import logging
from datetime import datetime

from sif_notifications.domain import lifecycle
from sif_notifications.domain.entities import Notification, NotificationState

from .actions import BATCH_RECOVERABLE_ERRORS
from .store import NotificationStore

logger = logging.getLogger(__name__)

_AWAITING_DELIVERY = (NotificationState.PENDING, NotificationState.SENT)


def list_overdue(store: NotificationStore, now: datetime) -> list[Notification]:
    """Return scheduled notifications whose time passed but were never sent."""

    return [notification for notification in store.all() if notification.is_overdue(now)]


def deliver_due_notifications(store: NotificationStore, now: datetime) -> list[str]:
    """Deliver every pending or sent notification whose ``scheduled_at`` has passed."""

    delivered: list[str] = []
    for notification in store.all():
        if notification.scheduled_at is None or notification.is_scheduled(now):
            continue
        if notification.state not in _AWAITING_DELIVERY:
            continue
        try:
            store.update(notification.id, lifecycle.delivering(now))
        except BATCH_RECOVERABLE_ERRORS as exc:
            logger.warning("Could not deliver scheduled notification %s: %s", notification.id, exc)
            continue
        delivered.append(notification.id)
    return delivered


def cancel_scheduled(store: NotificationStore, notification_id: str, now: datetime) -> Notification:
    return store.update(notification_id, lifecycle.cancelling(now))


__all__ = ["cancel_scheduled", "deliver_due_notifications", "list_overdue"]
