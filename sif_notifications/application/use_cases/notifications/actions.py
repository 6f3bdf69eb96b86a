"""Single and batch user actions over stored notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from sif_notifications.domain import lifecycle
from sif_notifications.domain.entities import Notification, NotificationState
from sif_notifications.domain.errors import (
    DuplicateIdError,
    InvalidTransitionError,
    NotFoundError,
    NotificationError,
    SendFailedError,
    UnsupportedActionError,
    ValidationFailedError,
)

from .collaborators import NavigationTarget, Navigator, ReplySender
from .store import NotificationStore

logger = logging.getLogger(__name__)

# Errors a batch records per item instead of aborting.
BATCH_RECOVERABLE_ERRORS = (NotFoundError, InvalidTransitionError, DuplicateIdError)

CustomActionHandler = Callable[[Notification], object]


class ActionKind(str, Enum):
    VIEW = "view"
    ARCHIVE = "archive"
    DELETE = "delete"


@dataclass(frozen=True)
class BatchFailure:
    notification_id: str
    reason: str
    error: NotificationError


@dataclass(frozen=True)
class BatchActionReport:
    """Outcome of a batch: which ids succeeded and why the others failed."""

    action: ActionKind
    succeeded_ids: tuple[str, ...]
    failures: tuple[BatchFailure, ...]

    @property
    def failed_ids(self) -> tuple[str, ...]:
        return tuple(failure.notification_id for failure in self.failures)

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded_ids)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return f"{self.succeeded_count} succeeded, {self.failed_count} failed"


class NotificationActionProcessor:
    """Execute view, archive, delete, reply and custom actions against a store."""

    _BUILTIN_ACTION_IDS = {
        "view": ActionKind.VIEW,
        "dismiss": ActionKind.VIEW,
        "archive": ActionKind.ARCHIVE,
        "delete": ActionKind.DELETE,
    }

    def __init__(
        self,
        store: NotificationStore,
        *,
        reply_sender: ReplySender | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        self._store = store
        self._reply_sender = reply_sender
        self._navigator = navigator
        self._handlers: dict[str, CustomActionHandler] = {}
        self._dispatch: dict[ActionKind, Callable[[str], Notification | None]] = {
            ActionKind.VIEW: self.view,
            ActionKind.ARCHIVE: self.archive,
            ActionKind.DELETE: self.delete,
        }

    # Single-item actions -------------------------------------------------

    def view(self, notification_id: str) -> Notification:
        return self._store.update(notification_id, lifecycle.mark_as_read)

    def archive(self, notification_id: str) -> Notification:
        return self._store.update(notification_id, lifecycle.archive)

    def delete(self, notification_id: str) -> None:
        if not self._store.remove(notification_id):
            logger.debug("Notification %s already deleted", notification_id)

    def perform(self, kind: ActionKind, notification_id: str) -> Notification | None:
        return self._dispatch[ActionKind(kind)](notification_id)

    # Batch actions -------------------------------------------------------

    def batch(self, kind: ActionKind, notification_ids: Iterable[str]) -> BatchActionReport:
        """Apply ``kind`` to every id, continuing past per-item failures."""

        kind = ActionKind(kind)
        succeeded: list[str] = []
        failures: list[BatchFailure] = []
        for notification_id in dict.fromkeys(notification_ids):
            try:
                self.perform(kind, notification_id)
            except BATCH_RECOVERABLE_ERRORS as exc:
                failures.append(BatchFailure(notification_id, exc.code, exc))
            else:
                succeeded.append(notification_id)

        report = BatchActionReport(kind, tuple(succeeded), tuple(failures))
        if failures:
            logger.info("Batch %s finished: %s", kind.value, report.summary())
        return report

    def mark_all_as_read(self) -> BatchActionReport:
        markable = (NotificationState.SENT, NotificationState.DELIVERED)
        ids = [
            notification.id
            for notification in self._store.all()
            if notification.state in markable
        ]
        return self.batch(ActionKind.VIEW, ids)

    # Reply ---------------------------------------------------------------

    async def reply(self, notification_id: str, text: str) -> Notification:
        """Send ``text`` in the notification's chat and mark it as read.

        The notification is left unchanged when sending fails.
        """

        message = (text or "").strip()
        if not message:
            raise ValidationFailedError(["text"], "Reply text must not be empty")
        notification = self._store.get(notification_id)
        chat_id = notification.payload.chat_id if notification.payload else None
        if not chat_id:
            raise ValidationFailedError(["chat_id"], "Notification has no chat to reply to")
        if self._reply_sender is None:
            raise UnsupportedActionError("No reply sender configured")

        try:
            await self._reply_sender.send(chat_id, message)
        except Exception as exc:
            raise SendFailedError(f"Reply to notification '{notification_id}' failed: {exc}") from exc

        try:
            return self.view(notification_id)
        except (NotFoundError, InvalidTransitionError) as exc:
            logger.warning("Reply sent but notification %s was not marked read: %s", notification_id, exc)
            return self._store.get(notification_id) if notification_id in self._store else notification

    # Custom actions and navigation -----------------------------------------

    def register_handler(self, action_id: str, handler: CustomActionHandler) -> None:
        self._handlers[action_id] = handler

    def perform_custom(self, notification_id: str, action_id: str) -> object:
        """Run the declared action ``action_id`` of a notification."""

        notification = self._store.get(notification_id)
        if notification.find_action(action_id) is None:
            raise UnsupportedActionError(
                f"Action '{action_id}' is not offered by notification '{notification_id}'"
            )

        builtin = self._BUILTIN_ACTION_IDS.get(action_id)
        if builtin is not None:
            return self.perform(builtin, notification_id)

        handler = self._handlers.get(action_id)
        if handler is not None:
            return handler(notification)

        if self._navigator is not None and notification.payload and notification.payload.deep_link:
            return self._navigator.resolve_deep_link(notification)

        raise UnsupportedActionError(f"No handler registered for action '{action_id}'")

    def open(self, notification_id: str) -> NavigationTarget | None:
        """Handle a tap: mark as read when possible and resolve the deep link."""

        notification = self._store.get(notification_id)
        if notification.state in (NotificationState.SENT, NotificationState.DELIVERED):
            notification = self.view(notification_id)
        if self._navigator is None or not (notification.payload and notification.payload.deep_link):
            return None
        return self._navigator.resolve_deep_link(notification)


__all__ = [
    "ActionKind",
    "BATCH_RECOVERABLE_ERRORS",
    "BatchActionReport",
    "BatchFailure",
    "NotificationActionProcessor",
]
