"""Domain entities exposed by the engine."""

from .notification import (
    DEEP_LINK_SCHEME,
    ActionStyle,
    Notification,
    NotificationAction,
    NotificationCategory,
    NotificationKind,
    NotificationPayload,
    NotificationPriority,
    NotificationState,
    PredefinedActions,
    default_actions_for,
)
from .notification_filter import FilterKind, NotificationFilter, NotificationGroup
from .notification_settings import (
    CURRENT_SETTINGS_VERSION,
    DEFAULT_QUIET_HOURS_END,
    DEFAULT_QUIET_HOURS_START,
    SETTINGS_FIELDS_BY_VERSION,
    UserNotificationSettings,
)

__all__ = [
    "ActionStyle",
    "CURRENT_SETTINGS_VERSION",
    "DEEP_LINK_SCHEME",
    "DEFAULT_QUIET_HOURS_END",
    "DEFAULT_QUIET_HOURS_START",
    "FilterKind",
    "Notification",
    "NotificationAction",
    "NotificationCategory",
    "NotificationFilter",
    "NotificationGroup",
    "NotificationKind",
    "NotificationPayload",
    "NotificationPriority",
    "NotificationState",
    "PredefinedActions",
    "SETTINGS_FIELDS_BY_VERSION",
    "UserNotificationSettings",
    "default_actions_for",
]
