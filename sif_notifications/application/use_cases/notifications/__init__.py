"""Notification center use cases."""

from .collaborators import (
    NavigationTarget,
    Navigator,
    NotificationPersistence,
    PageCursor,
    PermissionStatus,
    PushPermissions,
    ReplySender,
    SettingsBackupStore,
)
from .store import NotificationSnapshot, NotificationStore, StoreChange, StoreChangeKind
from .listing import (
    NotificationListView,
    filter_and_group,
    search_notifications,
    sort_by_priority,
)
from .actions import (
    ActionKind,
    BatchActionReport,
    BatchFailure,
    NotificationActionProcessor,
)
from .scheduling import cancel_scheduled, deliver_due_notifications, list_overdue
from .feed import FeedPage, NotificationFeedLoader
from .push_status import PushStatus, refresh_push_status

__all__ = [
    "ActionKind",
    "BatchActionReport",
    "BatchFailure",
    "FeedPage",
    "NavigationTarget",
    "Navigator",
    "NotificationActionProcessor",
    "NotificationFeedLoader",
    "NotificationListView",
    "NotificationPersistence",
    "NotificationSnapshot",
    "NotificationStore",
    "PageCursor",
    "PermissionStatus",
    "PushPermissions",
    "PushStatus",
    "ReplySender",
    "SettingsBackupStore",
    "StoreChange",
    "StoreChangeKind",
    "cancel_scheduled",
    "deliver_due_notifications",
    "filter_and_group",
    "list_overdue",
    "refresh_push_status",
    "search_notifications",
    "sort_by_priority",
]
