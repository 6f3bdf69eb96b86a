import pathlib
import sys
from datetime import datetime, timedelta, timezone

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from sif_notifications.domain import lifecycle
from sif_notifications.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationState,
)
from sif_notifications.domain.errors import InvalidTransitionError

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def _build_notification(
    *,
    state: NotificationState = NotificationState.PENDING,
    scheduled_at: datetime | None = None,
) -> Notification:
    return Notification(
        id="n-1",
        recipient_id="user-1",
        kind=NotificationKind.SIF_RECEIVED,
        title="New SIF",
        body="Someone sent you a SIF",
        created_at=NOW - timedelta(hours=1),
        state=state,
        scheduled_at=scheduled_at,
    )


def test_mark_delivered_walks_pending_through_sent() -> None:
    delivered = lifecycle.mark_delivered(_build_notification(), NOW)

    assert delivered.state is NotificationState.DELIVERED


def test_mark_delivered_refuses_future_scheduled_notification() -> None:
    notification = _build_notification(scheduled_at=NOW + timedelta(hours=2))

    with pytest.raises(InvalidTransitionError):
        lifecycle.mark_delivered(notification, NOW)


def test_mark_as_read_requires_sent_or_delivered() -> None:
    notification = _build_notification()

    with pytest.raises(InvalidTransitionError) as excinfo:
        lifecycle.mark_as_read(notification)

    assert excinfo.value.code == "invalid_transition"
    assert notification.state is NotificationState.PENDING


def test_mark_as_read_is_idempotent() -> None:
    read = _build_notification(state=NotificationState.READ)

    assert lifecycle.mark_as_read(read) is read


def test_archive_is_idempotent_and_terminal() -> None:
    archived = lifecycle.archive(_build_notification(state=NotificationState.DELIVERED))

    assert archived.state is NotificationState.ARCHIVED
    assert lifecycle.archive(archived) is archived
    with pytest.raises(InvalidTransitionError):
        lifecycle.mark_failed(archived, "boom")


def test_cancel_only_applies_to_future_scheduled_notifications() -> None:
    scheduled = _build_notification(scheduled_at=NOW + timedelta(days=1))

    assert lifecycle.cancel(scheduled, NOW).state is NotificationState.CANCELLED
    with pytest.raises(InvalidTransitionError):
        lifecycle.cancel(_build_notification(), NOW)


def test_mark_failed_records_reason_and_updates_it() -> None:
    failed = lifecycle.mark_failed(_build_notification(state=NotificationState.SENT), "timeout")
    retried = lifecycle.mark_failed(failed, "rejected")

    assert failed.failure_reason == "timeout"
    assert retried.state is NotificationState.FAILED
    assert retried.failure_reason == "rejected"


def test_read_notifications_cannot_fail() -> None:
    with pytest.raises(InvalidTransitionError):
        lifecycle.mark_failed(_build_notification(state=NotificationState.READ), "late")


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (NotificationState.PENDING, NotificationState.SENT, True),
        (NotificationState.SENT, NotificationState.READ, True),
        (NotificationState.DELIVERED, NotificationState.CANCELLED, False),
        (NotificationState.READ, NotificationState.DELIVERED, False),
        (NotificationState.FAILED, NotificationState.ARCHIVED, True),
        (NotificationState.ARCHIVED, NotificationState.READ, False),
    ],
)
def test_can_transition(current, target, allowed) -> None:
    assert lifecycle.can_transition(current, target) is allowed


def test_notification_rejects_schedule_before_creation() -> None:
    with pytest.raises(ValueError):
        _build_notification(scheduled_at=NOW - timedelta(days=1))


def test_read_and_archived_count_as_read() -> None:
    assert _build_notification(state=NotificationState.ARCHIVED).is_read
    assert _build_notification(state=NotificationState.FAILED).is_unread


def test_priorities_are_totally_ordered() -> None:
    ordered = sorted(
        [
            NotificationPriority.HIGH,
            NotificationPriority.LOW,
            NotificationPriority.CRITICAL,
            NotificationPriority.NORMAL,
        ]
    )

    assert ordered == [
        NotificationPriority.LOW,
        NotificationPriority.NORMAL,
        NotificationPriority.HIGH,
        NotificationPriority.CRITICAL,
    ]


@pytest.mark.parametrize(
    ("kind", "category"),
    [
        (NotificationKind.SIF_REMINDER, NotificationCategory.SIF),
        (NotificationKind.MESSAGE_RECEIVED, NotificationCategory.SOCIAL),
        (NotificationKind.SECURITY_ALERT, NotificationCategory.SYSTEM),
        (NotificationKind.TEMPLATE_UPDATED, NotificationCategory.TEMPLATE),
        (NotificationKind.MILESTONE, NotificationCategory.ACHIEVEMENT),
    ],
)
def test_kind_belongs_to_one_category(kind, category) -> None:
    assert kind.category is category


@pytest.mark.parametrize(
    ("created_at", "scheduled_at", "field_name"),
    [
        (datetime(2024, 5, 15, 11, 0), None, "created_at"),
        (NOW, datetime(2024, 5, 15, 13, 0), "scheduled_at"),
    ],
)
def test_notification_requires_timezone_aware_timestamps(created_at, scheduled_at, field_name) -> None:
    with pytest.raises(ValueError, match=field_name):
        Notification(
            id="n-1",
            recipient_id="user-1",
            kind=NotificationKind.SIF_RECEIVED,
            title="New SIF",
            body="",
            created_at=created_at,
            scheduled_at=scheduled_at,
        )
