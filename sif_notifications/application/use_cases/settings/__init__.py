"""Notification settings use cases."""

from .validation import (
    is_valid_time_of_day,
    parse_time_of_day,
    validate_settings,
    validate_settings_record,
)
from .migration import (
    MigrationOutcome,
    MigrationResult,
    backup_settings,
    migrate_settings,
    needs_migration,
    restore_settings,
    settings_from_backup,
)
from .controller import (
    GatingDecision,
    GatingOutcome,
    GatingReason,
    SettingsController,
    evaluate_gating,
    is_within_quiet_hours,
    is_within_window,
)

__all__ = [
    "GatingDecision",
    "GatingOutcome",
    "GatingReason",
    "MigrationOutcome",
    "MigrationResult",
    "SettingsController",
    "backup_settings",
    "evaluate_gating",
    "is_valid_time_of_day",
    "is_within_quiet_hours",
    "is_within_window",
    "migrate_settings",
    "needs_migration",
    "parse_time_of_day",
    "restore_settings",
    "settings_from_backup",
    "validate_settings",
    "validate_settings_record",
]
