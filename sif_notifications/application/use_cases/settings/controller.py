"""Gate inbound notifications with the user's settings and manage those settings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime, time, tzinfo
from enum import Enum
from typing import Any

from anyio import to_thread

from sif_notifications.domain import lifecycle
from sif_notifications.domain.entities import (
    Notification,
    NotificationPriority,
    UserNotificationSettings,
)
from sif_notifications.domain.errors import (
    InvalidTransitionError,
    MigrationFailedError,
    ValidationFailedError,
)
from sif_notifications.utils import local_time, now_in_app_timezone

from ..notifications.collaborators import NotificationPersistence, SettingsBackupStore
from ..notifications.store import NotificationStore
from .migration import MigrationOutcome, backup_settings, migrate_settings
from .validation import parse_time_of_day, validate_settings, validate_settings_record

logger = logging.getLogger(__name__)


class GatingOutcome(str, Enum):
    DELIVER = "deliver"
    DROP = "drop"


class GatingReason(str, Enum):
    NOTIFICATIONS_DISABLED = "notifications_disabled"
    CATEGORY_DISABLED = "category_disabled"
    QUIET_HOURS = "quiet_hours"
    QUIET_HOURS_CRITICAL = "quiet_hours_critical"
    NORMAL = "normal"


@dataclass(frozen=True)
class GatingDecision:
    """What to do with one inbound notification."""

    outcome: GatingOutcome
    reason: GatingReason
    play_sound: bool = False
    show_badge: bool = False
    presentation_suppressed: bool = False

    @property
    def should_store(self) -> bool:
        return self.outcome is GatingOutcome.DELIVER


def is_within_window(moment: time, start: time, end: time) -> bool:
    """Return ``True`` when ``moment`` falls in ``[start, end)``.

    ``start > end`` describes a window spanning midnight; ``start == end`` is
    an empty window.
    """

    if start == end:
        return False
    if start < end:
        return start <= moment < end
    return moment >= start or moment < end


def is_within_quiet_hours(
    settings: UserNotificationSettings, now: datetime, tz: tzinfo | None = None
) -> bool:
    if not settings.quiet_hours_enabled:
        return False
    return is_within_window(
        local_time(now, tz),
        parse_time_of_day(settings.quiet_hours_start),
        parse_time_of_day(settings.quiet_hours_end),
    )


def evaluate_gating(
    notification: Notification,
    settings: UserNotificationSettings,
    now: datetime,
    tz: tzinfo | None = None,
) -> GatingDecision:
    """Decide whether ``notification`` is dropped, suppressed or fully presented.

    The result depends only on the arguments.
    """

    if not settings.is_enabled:
        return GatingDecision(GatingOutcome.DROP, GatingReason.NOTIFICATIONS_DISABLED)
    if not settings.is_category_enabled(notification.category):
        return GatingDecision(GatingOutcome.DROP, GatingReason.CATEGORY_DISABLED)

    if is_within_quiet_hours(settings, now, tz):
        if notification.priority is NotificationPriority.CRITICAL:
            return GatingDecision(
                GatingOutcome.DELIVER,
                GatingReason.QUIET_HOURS_CRITICAL,
                play_sound=settings.sound_enabled,
                show_badge=settings.badge_enabled,
            )
        return GatingDecision(
            GatingOutcome.DELIVER,
            GatingReason.QUIET_HOURS,
            presentation_suppressed=True,
        )

    return GatingDecision(
        GatingOutcome.DELIVER,
        GatingReason.NORMAL,
        play_sound=settings.sound_enabled,
        show_badge=settings.badge_enabled,
    )


def apply_decision(
    notification: Notification, decision: GatingDecision, now: datetime
) -> Notification:
    """Stamp presentation flags and deliver ``notification`` unless it is not yet due."""

    stamped = replace(
        notification,
        play_sound=decision.play_sound,
        show_badge=decision.show_badge,
        presentation_suppressed=decision.presentation_suppressed,
    )
    if stamped.is_scheduled(now):
        return stamped
    try:
        return lifecycle.mark_delivered(stamped, now)
    except InvalidTransitionError:
        # Inbound notifications already past delivery (read, failed...) keep their state.
        return stamped


class SettingsController:
    """Owner of the active user's settings and gate in front of the store."""

    def __init__(
        self,
        store: NotificationStore,
        settings: UserNotificationSettings,
        *,
        persistence: NotificationPersistence | None = None,
        backups: SettingsBackupStore | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._store = store
        self._settings = validate_settings(settings)
        self._persistence = persistence
        self._backups = backups
        self._tz = tz

    @property
    def settings(self) -> UserNotificationSettings:
        return self._settings

    # Gating --------------------------------------------------------------

    def evaluate(self, notification: Notification, now: datetime | None = None) -> GatingDecision:
        return evaluate_gating(notification, self._settings, now or now_in_app_timezone(), self._tz)

    def receive(
        self, notification: Notification, now: datetime | None = None
    ) -> tuple[GatingDecision, Notification | None]:
        """Gate ``notification`` and store it unless it is dropped."""

        now = now or now_in_app_timezone()
        decision = self.evaluate(notification, now)
        if not decision.should_store:
            logger.info(
                "Dropped notification %s (%s): %s",
                notification.id,
                notification.kind.value,
                decision.reason.value,
            )
            return decision, None
        stored = self._store.add(apply_decision(notification, decision, now))
        return decision, stored

    # Settings mutations ----------------------------------------------------

    def update_settings(self, now: datetime | None = None, **changes: Any) -> UserNotificationSettings:
        """Apply ``changes``; on validation failure the prior settings stay in force."""

        read_only = [name for name in changes if name in ("uid", "version", "last_updated", "extra")]
        if read_only:
            raise ValidationFailedError(read_only, "These settings fields cannot be edited")
        try:
            candidate = replace(
                self._settings, last_updated=now or now_in_app_timezone(), **changes
            )
        except TypeError as exc:
            raise ValidationFailedError(list(changes), str(exc)) from exc
        self._settings = validate_settings(candidate)
        return self._settings

    def reset_to_defaults(self, now: datetime | None = None) -> UserNotificationSettings:
        self._settings = UserNotificationSettings.defaults(
            self._settings.uid, now or now_in_app_timezone()
        )
        return self._settings

    def adopt(self, settings: UserNotificationSettings) -> UserNotificationSettings:
        """Replace the settings with an externally produced, valid record."""

        if settings.version < self._settings.version and settings.uid == self._settings.uid:
            raise ValidationFailedError(["version"], "Settings version must not decrease")
        self._settings = validate_settings(settings)
        return self._settings

    # Persistence -----------------------------------------------------------

    async def load(self, uid: str, now: datetime | None = None) -> UserNotificationSettings:
        """Load, migrate and validate ``uid``'s settings; fall back to defaults."""

        now = now or now_in_app_timezone()
        if self._persistence is None:
            self._settings = UserNotificationSettings.defaults(uid, now)
            return self._settings

        try:
            record = await to_thread.run_sync(self._persistence.load_settings, uid)
        except Exception as exc:
            logger.warning("Could not load settings for %s, keeping current settings: %s", uid, exc)
            return self._settings
        self._settings = self._settings_from_record(uid, record, now)
        return self._settings

    async def save(self) -> None:
        if self._persistence is None:
            raise RuntimeError("No persistence configured for settings")
        await to_thread.run_sync(self._persistence.save_settings, self._settings)

    def _settings_from_record(
        self, uid: str, record: Mapping[str, Any] | None, now: datetime
    ) -> UserNotificationSettings:
        if record is None:
            return UserNotificationSettings.defaults(uid, now)
        try:
            result = migrate_settings(record, now=now)
            if result.outcome is MigrationOutcome.MIGRATED and self._backups is not None:
                backup_settings(self._backups, record, now=now)
            return UserNotificationSettings.from_record(validate_settings_record(result.record))
        except MigrationFailedError as exc:
            logger.warning("Settings migration for %s failed, using defaults: %s", uid, exc.reason)
        except ValidationFailedError as exc:
            logger.warning(
                "Stored settings for %s are invalid (%s), using defaults",
                uid,
                ", ".join(exc.fields),
            )
        return UserNotificationSettings.defaults(uid, now)


__all__ = [
    "GatingDecision",
    "GatingOutcome",
    "GatingReason",
    "SettingsController",
    "apply_decision",
    "evaluate_gating",
    "is_within_quiet_hours",
    "is_within_window",
]
