import pathlib
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from sif_notifications.application.use_cases.ingest import (
    NotificationIngestor,
    parse_raw_notification,
)
from sif_notifications.application.use_cases.notifications import NotificationStore
from sif_notifications.application.use_cases.settings import GatingReason, SettingsController
from sif_notifications.domain.entities import (
    NotificationKind,
    NotificationPriority,
    NotificationState,
    PredefinedActions,
    UserNotificationSettings,
)
from sif_notifications.domain.errors import IngestError

UTC = timezone.utc
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


def _build_raw(**overrides) -> dict:
    raw = {
        "id": "n-1",
        "recipientUID": "user-1",
        "senderId": "user-2",
        "type": "message_received",
        "title": "  New message  ",
        "body": "See you at 6?",
        "createdAt": "2024-05-15T11:00:00Z",
        "payload": {
            "chatId": "chat-9",
            "senderId": "user-2",
            "deepLink": "isayitforward://chat/chat-9",
        },
    }
    raw.update(overrides)
    return raw


def _build_ingestor(**settings_overrides) -> tuple[NotificationIngestor, NotificationStore]:
    store = NotificationStore()
    settings = replace(UserNotificationSettings.defaults("user-1", NOW), **settings_overrides)
    controller = SettingsController(store, settings, tz=UTC)
    return NotificationIngestor(controller, tz=UTC), store


def test_parse_accepts_camel_case_payload() -> None:
    notification = parse_raw_notification(_build_raw(), now=NOW, tz=UTC)

    assert notification.kind is NotificationKind.MESSAGE_RECEIVED
    assert notification.recipient_id == "user-1"
    assert notification.sender_id == "user-2"
    assert notification.title == "New message"
    assert notification.priority is NotificationPriority.HIGH
    assert notification.created_at == NOW - timedelta(hours=1)
    assert notification.payload.chat_id == "chat-9"
    assert PredefinedActions.REPLY in notification.actions


def test_parse_assigns_id_and_creation_time_when_missing() -> None:
    raw = _build_raw()
    del raw["id"]
    del raw["createdAt"]

    notification = parse_raw_notification(raw, now=NOW, tz=UTC)

    assert notification.id
    assert notification.created_at == NOW


def test_declared_actions_and_priority_are_kept() -> None:
    raw = _build_raw(
        priority="critical",
        actions=[{"id": "snooze", "title": "Snooze", "style": "cancel"}],
    )

    notification = parse_raw_notification(raw, now=NOW, tz=UTC)

    assert notification.priority is NotificationPriority.CRITICAL
    assert [action.id for action in notification.actions] == ["snooze"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"type": "carrier_pigeon"},
        {"recipientUID": ""},
        {"payload": {"deepLink": "https://example.com/sif/1"}},
        {"payload": {"chatId": " "}},
        {"scheduledAt": "2024-05-15T10:00:00Z"},
        {"priority": "urgent"},
    ],
)
def test_malformed_payloads_raise_ingest_error(overrides) -> None:
    with pytest.raises(IngestError):
        parse_raw_notification(_build_raw(**overrides), now=NOW, tz=UTC)


def test_ingest_stores_delivered_notification() -> None:
    ingestor, store = _build_ingestor()

    outcome = ingestor.ingest(_build_raw(), NOW)

    assert outcome.stored
    assert outcome.decision.reason is GatingReason.NORMAL
    assert store.get("n-1").state is NotificationState.DELIVERED
    assert store.unread_count() == 1


def test_ingest_reports_dropped_notifications() -> None:
    ingestor, store = _build_ingestor(social_notifications_enabled=False)

    outcome = ingestor.ingest(_build_raw(), NOW)

    assert not outcome.stored
    assert outcome.decision.reason is GatingReason.CATEGORY_DISABLED
    assert len(store) == 0


def test_ingest_rejects_duplicates_and_foreign_recipients() -> None:
    ingestor, store = _build_ingestor()
    ingestor.ingest(_build_raw(), NOW)

    with pytest.raises(IngestError):
        ingestor.ingest(_build_raw(), NOW)
    with pytest.raises(IngestError):
        ingestor.ingest(_build_raw(id="n-2", recipientUID="user-9"), NOW)

    assert store.ids() == frozenset({"n-1"})
