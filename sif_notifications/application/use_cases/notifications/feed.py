"""Paginated loading of notifications from persistence into the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anyio
from anyio import to_thread

from sif_notifications.config import get_settings
from sif_notifications.domain.entities import Notification, NotificationFilter
from sif_notifications.domain.errors import DuplicateIdError

from .collaborators import NotificationPersistence, PageCursor
from .listing import NotificationListView
from .store import NotificationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedPage:
    """Result of one page request."""

    token: int
    added_ids: tuple[str, ...]
    received: int
    has_more: bool
    stale: bool = False


class NotificationFeedLoader:
    """Load pages newest-first and merge them into the store.

    Every request carries a token. Changing the query bumps the token and
    cancels the in-flight request, so a superseded page is never applied.
    """

    def __init__(
        self,
        store: NotificationStore,
        persistence: NotificationPersistence,
        *,
        view: NotificationListView | None = None,
        page_size: int | None = None,
    ) -> None:
        self._store = store
        self._persistence = persistence
        self._view = view
        self._page_size = page_size or get_settings().notifications_page_size
        self._token = 0
        self._cursor: PageCursor | None = None
        self._has_more = True
        self._scope: anyio.CancelScope | None = None

    @property
    def has_more(self) -> bool:
        return self._has_more

    def cancel(self) -> int:
        """Supersede any in-flight request and return the new token."""

        self._token += 1
        if self._scope is not None:
            self._scope.cancel()
        return self._token

    async def load_initial(self) -> FeedPage:
        token = self.cancel()
        self._cursor = None
        self._has_more = True
        return await self._load(token, None)

    async def load_more(self) -> FeedPage | None:
        """Load the page after the last one; ``None`` when nothing is left or a load runs."""

        if not self._has_more or self._scope is not None:
            return None
        return await self._load(self._token, self._cursor)

    async def apply_query(
        self,
        notification_filter: NotificationFilter | None = None,
        search_term: str | None = None,
    ) -> FeedPage:
        """Switch the view's query and restart loading from the first page."""

        if self._view is not None:
            self._view.set_query(notification_filter, search_term)
        return await self.load_initial()

    async def _load(self, token: int, cursor: PageCursor | None) -> FeedPage:
        items: list[Notification] | None = None
        with anyio.CancelScope() as scope:
            self._scope = scope
            try:
                items = await to_thread.run_sync(
                    self._persistence.load_page, cursor, self._page_size, abandon_on_cancel=True
                )
            finally:
                if self._scope is scope:
                    self._scope = None

        if items is None or token != self._token:
            logger.warning("Discarding stale notification page for request %s", token)
            return FeedPage(token, (), 0, self._has_more, stale=True)

        added: list[str] = []
        for notification in items:
            try:
                self._store.add(notification)
            except DuplicateIdError:
                continue
            added.append(notification.id)

        self._has_more = len(items) >= self._page_size
        if items:
            self._cursor = PageCursor.after(items[-1])
        return FeedPage(token, tuple(added), len(items), self._has_more)


__all__ = ["FeedPage", "NotificationFeedLoader"]
