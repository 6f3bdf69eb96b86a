"""Lifecycle state machine for notifications.

Every transition is a pure function taking a :class:`Notification` and returning
the updated value. Illegal transitions raise :class:`InvalidTransitionError`
and never produce a partially updated notification.

::

    pending -> sent -> delivered -> read
    pending/sent -> cancelled          (only while scheduled in the future)
    any but read/archived -> failed
    any but archived -> archived       (left only by deletion)
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable

from sif_notifications.domain.entities.notification import Notification, NotificationState
from sif_notifications.domain.errors import InvalidTransitionError

Transition = Callable[[Notification], Notification]

_S = NotificationState

ALLOWED_TRANSITIONS: dict[NotificationState, frozenset[NotificationState]] = {
    _S.PENDING: frozenset({_S.SENT, _S.FAILED, _S.CANCELLED, _S.ARCHIVED}),
    _S.SENT: frozenset({_S.DELIVERED, _S.READ, _S.FAILED, _S.CANCELLED, _S.ARCHIVED}),
    _S.DELIVERED: frozenset({_S.READ, _S.FAILED, _S.ARCHIVED}),
    _S.READ: frozenset({_S.ARCHIVED}),
    _S.FAILED: frozenset({_S.ARCHIVED}),
    _S.CANCELLED: frozenset({_S.FAILED, _S.ARCHIVED}),
    _S.ARCHIVED: frozenset(),
}


def can_transition(current: NotificationState, target: NotificationState) -> bool:
    """Return ``True`` when ``current -> target`` is an edge of the machine."""

    return target in ALLOWED_TRANSITIONS[current]


def _move(notification: Notification, target: NotificationState, **changes) -> Notification:
    if not can_transition(notification.state, target):
        raise InvalidTransitionError(
            notification.id, notification.state.value, target.value
        )
    return replace(notification, state=target, **changes)


def mark_sent(notification: Notification) -> Notification:
    if notification.state is _S.SENT:
        return notification
    return _move(notification, _S.SENT)


def mark_delivered(notification: Notification, now: datetime) -> Notification:
    """Move ``notification`` to ``delivered``, walking through ``sent`` if needed."""

    if notification.state is _S.DELIVERED:
        return notification
    if notification.is_scheduled(now):
        raise InvalidTransitionError(
            notification.id,
            notification.state.value,
            _S.DELIVERED.value,
            detail="scheduled delivery time has not been reached",
        )
    if notification.state is _S.PENDING:
        notification = mark_sent(notification)
    return _move(notification, _S.DELIVERED)


def mark_as_read(notification: Notification) -> Notification:
    if notification.state is _S.READ:
        return notification
    if notification.state not in (_S.SENT, _S.DELIVERED):
        raise InvalidTransitionError(
            notification.id, notification.state.value, _S.READ.value
        )
    return _move(notification, _S.READ)


def archive(notification: Notification) -> Notification:
    if notification.state is _S.ARCHIVED:
        return notification
    return _move(notification, _S.ARCHIVED)


def cancel(notification: Notification, now: datetime) -> Notification:
    if not notification.is_scheduled(now):
        raise InvalidTransitionError(
            notification.id,
            notification.state.value,
            _S.CANCELLED.value,
            detail="only future scheduled notifications can be cancelled",
        )
    return _move(notification, _S.CANCELLED)


def mark_failed(notification: Notification, reason: str) -> Notification:
    if notification.state is _S.FAILED:
        return replace(notification, failure_reason=reason)
    return _move(notification, _S.FAILED, failure_reason=reason)


def cancelling(now: datetime) -> Transition:
    """Return a store mutation that cancels at ``now``."""

    return lambda notification: cancel(notification, now)


def delivering(now: datetime) -> Transition:
    """Return a store mutation that delivers at ``now``."""

    return lambda notification: mark_delivered(notification, now)


__all__ = [
    "ALLOWED_TRANSITIONS",
    "Transition",
    "archive",
    "can_transition",
    "cancel",
    "cancelling",
    "delivering",
    "mark_as_read",
    "mark_delivered",
    "mark_failed",
    "mark_sent",
]
