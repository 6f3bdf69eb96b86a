import pathlib
import sys
from datetime import datetime, timedelta, timezone

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from sif_notifications.config import get_settings, reset_settings_cache
from sif_notifications.domain.deep_links import is_valid_deep_link, parse_deep_link
from sif_notifications.domain.entities import NotificationPayload
from sif_notifications.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    local_date,
    reset_app_timezone_cache,
)


@pytest.fixture()
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    reset_settings_cache()
    reset_app_timezone_cache()
    yield monkeypatch
    reset_settings_cache()
    reset_app_timezone_cache()


def test_settings_are_read_from_the_environment(fresh_settings) -> None:
    fresh_settings.setenv("NOTIFICATIONS_PAGE_SIZE", "5")
    fresh_settings.setenv("SETTINGS_BACKUP_LIMIT", "3")
    reset_settings_cache()

    settings = get_settings()

    assert settings.notifications_page_size == 5
    assert settings.settings_backup_limit == 3
    assert get_settings() is settings


@pytest.mark.parametrize(
    ("configured", "offset"),
    [
        ("UTC-05:00", timedelta(hours=-5)),
        ("GMT+0530", timedelta(hours=5, minutes=30)),
        ("Not/AZone", timedelta(0)),
    ],
)
def test_app_timezone_accepts_offsets_and_falls_back_to_utc(fresh_settings, configured, offset) -> None:
    fresh_settings.setenv("APP_TIMEZONE", configured)

    tz = get_app_timezone()

    assert tz.utcoffset(datetime(2024, 1, 1)) == offset


def test_naive_values_are_treated_as_local_wall_clock() -> None:
    tz = timezone(timedelta(hours=2))
    naive = datetime(2024, 5, 15, 23, 30)

    aware = ensure_app_timezone(naive, tz)

    assert aware.utcoffset() == timedelta(hours=2)
    assert ensure_app_naive_datetime(aware.astimezone(timezone.utc), tz) == naive
    assert local_date(datetime(2024, 5, 15, 23, 30, tzinfo=timezone.utc), tz).day == 16
    assert ensure_app_timezone(None) is None


def test_parse_deep_link() -> None:
    link = parse_deep_link("isayitforward://sif/42?source=push")

    assert link.path == "sif"
    assert link.target_id == "42"
    assert link.parameters["source"] == "push"


@pytest.mark.parametrize(
    "url",
    ["https://isayitforward.com/sif/42", "isayitforward:///42", "not a link", ""],
)
def test_foreign_links_are_rejected(url) -> None:
    assert parse_deep_link(url) is None
    assert not is_valid_deep_link(url)


def test_payload_factories_build_valid_links() -> None:
    payloads = [
        NotificationPayload.for_sif("sif-1", "user-2"),
        NotificationPayload.for_friend_request("user-2"),
        NotificationPayload.for_message("chat-1", "user-2"),
        NotificationPayload.for_template("tpl-1"),
        NotificationPayload.for_achievement("first-sif", {"level": "1"}),
    ]

    assert [parse_deep_link(payload.deep_link).path for payload in payloads] == [
        "sif",
        "profile",
        "chat",
        "template",
        "achievement",
    ]
