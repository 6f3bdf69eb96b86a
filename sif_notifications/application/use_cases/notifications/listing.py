"""Derive grouped, display-ready notification lists."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from sif_notifications.domain.entities import (
    FilterKind,
    Notification,
    NotificationFilter,
    NotificationGroup,
)
from sif_notifications.utils import get_app_timezone, local_date, now_in_app_timezone

from .store import NotificationStore, StoreChange

TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"


def search_notifications(
    notifications: Iterable[Notification], search_term: str | None
) -> list[Notification]:
    """Keep notifications whose title or body contains ``search_term`` (any case)."""

    if not search_term or not search_term.strip():
        return list(notifications)
    term = search_term.casefold()
    return [
        notification
        for notification in notifications
        if term in notification.title.casefold() or term in notification.body.casefold()
    ]


def sort_newest_first(notifications: Iterable[Notification]) -> list[Notification]:
    ordered = sorted(notifications, key=lambda notification: notification.id)
    ordered.sort(key=lambda notification: notification.created_at, reverse=True)
    return ordered


def sort_by_priority(notifications: Iterable[Notification]) -> list[Notification]:
    """Order by priority (critical first) and then newest-first."""

    ordered = sort_newest_first(notifications)
    ordered.sort(key=lambda notification: notification.priority.rank, reverse=True)
    return ordered


def group_label(day: date, today: date) -> str:
    if day == today:
        return TODAY_LABEL
    if day == today - timedelta(days=1):
        return YESTERDAY_LABEL
    return f"{day:%B} {day.day}, {day.year}"


def filter_and_group(
    notifications: Iterable[Notification],
    notification_filter: NotificationFilter,
    search_term: str | None = None,
    *,
    now: datetime,
    tz: tzinfo | None = None,
) -> list[NotificationGroup]:
    """Return the date groups shown for ``notification_filter`` and ``search_term``.

    Groups are ordered ``Today``, ``Yesterday`` and then by descending date;
    members are ordered newest-first with ties broken by ``id``. The input is
    never modified and identical inputs always yield identical groups.
    """

    tz = tz or get_app_timezone()
    matching = [
        notification
        for notification in notifications
        if notification_filter.matches(notification, now)
    ]
    matching = search_notifications(matching, search_term)
    if not matching:
        return []

    today = local_date(now, tz)
    buckets: dict[date, list[Notification]] = {}
    for notification in matching:
        buckets.setdefault(local_date(notification.created_at, tz), []).append(notification)

    def bucket_order(day: date) -> tuple[int, int]:
        if day == today:
            rank = 0
        elif day == today - timedelta(days=1):
            rank = 1
        else:
            rank = 2
        return (rank, -day.toordinal())

    groups: list[NotificationGroup] = []
    for day in sorted(buckets, key=bucket_order):
        members = tuple(sort_newest_first(buckets[day]))
        groups.append(
            NotificationGroup(
                label=group_label(day, today),
                notifications=members,
                unread_count=sum(1 for member in members if member.is_unread),
            )
        )
    return groups


class NotificationListView:
    """Grouped list of the store's notifications for one filter and search term.

    The derived groups are cached until the store reports a change, the query
    changes, or the local day rolls over.
    """

    def __init__(
        self,
        store: NotificationStore,
        notification_filter: NotificationFilter | None = None,
        search_term: str = "",
        *,
        tz: tzinfo | None = None,
    ) -> None:
        self._store = store
        self._filter = notification_filter or NotificationFilter.all()
        self._search_term = search_term
        self._tz = tz
        self._lock = threading.Lock()
        self._cache: tuple[date, list[NotificationGroup]] | None = None
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def filter(self) -> NotificationFilter:
        return self._filter

    @property
    def search_term(self) -> str:
        return self._search_term

    def set_query(
        self,
        notification_filter: NotificationFilter | None = None,
        search_term: str | None = None,
    ) -> None:
        with self._lock:
            if notification_filter is not None:
                self._filter = notification_filter
            if search_term is not None:
                self._search_term = search_term
            self._cache = None

    def groups(self, now: datetime | None = None) -> list[NotificationGroup]:
        now = now or now_in_app_timezone()
        tz = self._tz or get_app_timezone()
        today = local_date(now, tz)
        with self._lock:
            # Scheduled-filter membership depends on the clock, so it is never cached.
            if self._cache is not None and self._cache[0] == today and not self._time_sensitive():
                return list(self._cache[1])
            groups = filter_and_group(
                self._store.all(), self._filter, self._search_term, now=now, tz=tz
            )
            self._cache = (today, groups)
            return list(groups)

    def visible_ids(self, now: datetime | None = None) -> list[str]:
        return [
            notification.id
            for group in self.groups(now)
            for notification in group.notifications
        ]

    def invalidate(self) -> None:
        with self._lock:
            self._cache = None

    def close(self) -> None:
        self._unsubscribe()

    def _time_sensitive(self) -> bool:
        return self._filter.kind is FilterKind.SCHEDULED

    def _on_store_change(self, change: StoreChange) -> None:
        self.invalidate()


__all__ = [
    "NotificationListView",
    "TODAY_LABEL",
    "YESTERDAY_LABEL",
    "filter_and_group",
    "group_label",
    "search_notifications",
    "sort_by_priority",
    "sort_newest_first",
]
