"""Versioned migration and backup of notification settings records.

A record at version ``v`` is brought to :data:`CURRENT_SETTINGS_VERSION` one
step at a time. Each step back-fills the fields introduced by the next version
with their defaults and stamps ``version`` and ``last_updated``. Unknown keys
are carried through untouched, and the caller's mapping is never modified.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from sif_notifications.domain.entities import (
    CURRENT_SETTINGS_VERSION,
    SETTINGS_FIELDS_BY_VERSION,
    UserNotificationSettings,
)
from sif_notifications.domain.errors import MigrationFailedError

from ..notifications.collaborators import SettingsBackupStore
from .validation import validate_settings_record

logger = logging.getLogger(__name__)

MigrationStep = Callable[[dict[str, Any]], dict[str, Any]]


class MigrationOutcome(str, Enum):
    MIGRATED = "migrated"
    NO_MIGRATION_NEEDED = "no_migration_needed"


@dataclass(frozen=True)
class MigrationResult:
    outcome: MigrationOutcome
    record: dict[str, Any]
    from_version: int
    to_version: int = CURRENT_SETTINGS_VERSION
    applied_steps: tuple[int, ...] = field(default_factory=tuple)


def record_version(record: Mapping[str, Any]) -> int:
    """Return the schema version stored in ``record`` (missing means 0)."""

    raw = record.get("version", 0)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise MigrationFailedError(f"corrupted settings version {raw!r}")
    if raw < 0:
        raise MigrationFailedError(f"corrupted settings version {raw!r}")
    return raw


def needs_migration(record: Mapping[str, Any]) -> bool:
    return record_version(record) < CURRENT_SETTINGS_VERSION


def _backfill(version: int) -> MigrationStep:
    defaults = SETTINGS_FIELDS_BY_VERSION[version]

    def step(record: dict[str, Any]) -> dict[str, Any]:
        for name, default in defaults.items():
            record.setdefault(name, default)
        return record

    return step


# Step ``n`` upgrades a record from version ``n - 1`` to version ``n``.
MIGRATION_STEPS: dict[int, MigrationStep] = {
    version: _backfill(version) for version in SETTINGS_FIELDS_BY_VERSION
}


def migrate_settings(
    record: Mapping[str, Any],
    *,
    now: datetime,
    steps: Mapping[int, MigrationStep] | None = None,
) -> MigrationResult:
    """Bring ``record`` to the current schema version.

    Raises :class:`MigrationFailedError` when any step fails; ``record`` itself
    is left untouched in every case.
    """

    steps = MIGRATION_STEPS if steps is None else steps
    source_version = record_version(record)
    if source_version > CURRENT_SETTINGS_VERSION:
        raise MigrationFailedError(f"unsupported settings version {source_version}")
    if source_version == CURRENT_SETTINGS_VERSION:
        return MigrationResult(
            MigrationOutcome.NO_MIGRATION_NEEDED, dict(record), source_version
        )

    migrated = copy.deepcopy(dict(record))
    applied: list[int] = []
    for target in range(source_version + 1, CURRENT_SETTINGS_VERSION + 1):
        step = steps.get(target)
        if step is None:
            raise MigrationFailedError(f"no migration step to version {target}")
        try:
            migrated = step(migrated)
        except MigrationFailedError:
            raise
        except Exception as exc:
            raise MigrationFailedError(f"step to version {target} failed: {exc}") from exc
        migrated["version"] = target
        migrated["last_updated"] = now
        applied.append(target)

    logger.info(
        "Migrated settings for %s from version %s to %s",
        record.get("uid"),
        source_version,
        CURRENT_SETTINGS_VERSION,
    )
    return MigrationResult(
        MigrationOutcome.MIGRATED, migrated, source_version, applied_steps=tuple(applied)
    )


def backup_settings(
    backups: SettingsBackupStore, record: Mapping[str, Any], *, now: datetime
) -> None:
    """Snapshot ``record`` under ``(uid, now)`` before a destructive change."""

    uid = record.get("uid")
    if not uid:
        raise MigrationFailedError("cannot back up settings without a uid")
    backups.save_backup(str(uid), now, dict(record))


def restore_settings(backups: SettingsBackupStore, uid: str) -> Mapping[str, Any] | None:
    """Return the most recent snapshot for ``uid``, if any."""

    return backups.latest_backup(uid)


def settings_from_backup(
    backups: SettingsBackupStore, uid: str, *, now: datetime
) -> UserNotificationSettings | None:
    """Restore, migrate and validate the newest backup of ``uid``."""

    snapshot = restore_settings(backups, uid)
    if snapshot is None:
        return None
    result = migrate_settings(snapshot, now=now)
    return UserNotificationSettings.from_record(validate_settings_record(result.record))


__all__ = [
    "MIGRATION_STEPS",
    "MigrationOutcome",
    "MigrationResult",
    "MigrationStep",
    "backup_settings",
    "migrate_settings",
    "needs_migration",
    "record_version",
    "restore_settings",
    "settings_from_backup",
]
