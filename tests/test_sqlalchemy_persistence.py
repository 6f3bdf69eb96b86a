import pathlib
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from sif_notifications.application.use_cases.notifications import (
    NotificationFeedLoader,
    NotificationPersistence,
    NotificationStore,
    PageCursor,
    SettingsBackupStore,
)
from sif_notifications.application.use_cases.settings import SettingsController
from sif_notifications.config import Settings
from sif_notifications.domain.entities import (
    CURRENT_SETTINGS_VERSION,
    Notification,
    NotificationKind,
    NotificationPayload,
    NotificationState,
    UserNotificationSettings,
    default_actions_for,
)
from sif_notifications.domain.errors import DuplicateIdError
from sif_notifications.infrastructure.database import (
    create_engine_from_settings,
    initialize_database,
    make_session_factory,
)
from sif_notifications.infrastructure.models import NotificationSettingsBackupModel
from sif_notifications.infrastructure.persistence import SqlAlchemyNotificationPersistence
from sif_notifications.infrastructure.repositories import NotificationRepository

UTC = timezone.utc
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture()
def persistence(session_factory) -> SqlAlchemyNotificationPersistence:
    return SqlAlchemyNotificationPersistence(
        session_factory, recipient_id="user-1", backup_limit=2, tz=UTC
    )


def _build_notification(
    notification_id: str,
    created_at: datetime,
    *,
    recipient_id: str = "user-1",
) -> Notification:
    return Notification(
        id=notification_id,
        recipient_id=recipient_id,
        sender_id="user-2",
        kind=NotificationKind.SIF_RECEIVED,
        title="New SIF",
        body="Open it",
        created_at=created_at,
        state=NotificationState.DELIVERED,
        payload=NotificationPayload.for_sif("sif-1", "user-2"),
        actions=default_actions_for(NotificationKind.SIF_RECEIVED),
        scheduled_at=created_at + timedelta(minutes=5),
        play_sound=True,
    )


def test_adapter_satisfies_collaborator_protocols(persistence) -> None:
    assert isinstance(persistence, NotificationPersistence)
    assert isinstance(persistence, SettingsBackupStore)


def test_notifications_round_trip(persistence) -> None:
    notification = _build_notification("n-1", NOW)

    persistence.save_notification(notification)
    updated = persistence.save_notification(replace(notification, state=NotificationState.READ))

    assert updated.state is NotificationState.READ
    assert persistence.load_page(None, 10) == [replace(notification, state=NotificationState.READ)]
    assert persistence.delete_notification("n-1") is True
    assert persistence.delete_notification("n-1") is False


def test_create_rejects_duplicates(session_factory) -> None:
    with session_factory() as session:
        repository = NotificationRepository(session, tz=UTC)
        repository.create(_build_notification("n-1", NOW))
        with pytest.raises(DuplicateIdError):
            repository.create(_build_notification("n-1", NOW))


def test_pages_are_newest_first_with_id_tie_break(persistence) -> None:
    persistence.save_notification(_build_notification("c", NOW))
    persistence.save_notification(_build_notification("a", NOW))
    persistence.save_notification(_build_notification("b", NOW - timedelta(hours=1)))
    persistence.save_notification(_build_notification("z", NOW - timedelta(hours=2)))
    persistence.save_notification(_build_notification("other", NOW, recipient_id="user-9"))

    first = persistence.load_page(None, 2)
    second = persistence.load_page(PageCursor.after(first[-1]), 2)
    third = persistence.load_page(PageCursor.after(second[-1]), 2)

    assert [n.id for n in first] == ["a", "c"]
    assert [n.id for n in second] == ["b", "z"]
    assert third == []


@pytest.mark.anyio
async def test_feed_loader_reads_through_the_adapter(persistence) -> None:
    for index in range(3):
        persistence.save_notification(_build_notification(f"n{index}", NOW - timedelta(minutes=index)))
    store = NotificationStore()
    loader = NotificationFeedLoader(store, persistence, page_size=2)

    await loader.load_initial()
    await loader.load_more()

    assert store.ids() == frozenset({"n0", "n1", "n2"})
    assert not loader.has_more


@pytest.mark.anyio
async def test_settings_saved_and_loaded_through_controller(persistence) -> None:
    settings = replace(
        UserNotificationSettings.defaults("user-1", NOW),
        quiet_hours_enabled=True,
        sound_enabled=False,
        extra={"beta_flag": "on"},
    )
    writer = SettingsController(NotificationStore(), settings, persistence=persistence, tz=UTC)
    await writer.save()

    reader = SettingsController(
        NotificationStore(),
        UserNotificationSettings.defaults("user-1", NOW),
        persistence=persistence,
        backups=persistence,
        tz=UTC,
    )
    loaded = await reader.load("user-1", NOW + timedelta(days=1))

    assert loaded == settings
    assert persistence.load_settings("user-1")["version"] == CURRENT_SETTINGS_VERSION
    assert persistence.latest_backup("user-1") is None


def test_backups_are_pruned_to_the_limit(persistence, session_factory) -> None:
    for days in (3, 2, 1):
        persistence.save_backup(
            "user-1",
            NOW - timedelta(days=days),
            {"uid": "user-1", "version": 1, "last_updated": NOW - timedelta(days=days)},
        )

    latest = persistence.latest_backup("user-1")

    assert latest["last_updated"] == "2024-05-14T12:00:00Z"
    with session_factory() as session:
        assert session.query(NotificationSettingsBackupModel).count() == 2


def test_engine_is_built_from_database_url() -> None:
    engine = create_engine_from_settings(Settings(database_url="sqlite://"))
    try:
        initialize_database(engine)
        persistence = SqlAlchemyNotificationPersistence(make_session_factory(engine), tz=UTC)

        assert persistence.load_settings("nobody") is None
        assert persistence.load_page(None, 5) == []
    finally:
        engine.dispose()
