"""Exceptions raised by the notification domain engine."""

from __future__ import annotations

from collections.abc import Iterable


class NotificationError(Exception):
    """Base class for every error raised by the engine."""

    code = "notification_error"


class DuplicateIdError(NotificationError):
    """A notification with the same identifier is already stored."""

    code = "duplicate_id"

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification '{notification_id}' already exists")
        self.notification_id = notification_id


class NotFoundError(NotificationError, LookupError):
    """The requested notification is not present in the store."""

    code = "not_found"

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification '{notification_id}' not found")
        self.notification_id = notification_id


class InvalidTransitionError(NotificationError):
    """A lifecycle transition is not allowed from the current state."""

    code = "invalid_transition"

    def __init__(
        self,
        notification_id: str,
        current: str,
        target: str,
        detail: str | None = None,
    ) -> None:
        message = f"Notification '{notification_id}' cannot move from {current} to {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.notification_id = notification_id
        self.current = current
        self.target = target


class ValidationFailedError(NotificationError, ValueError):
    """Input data did not pass validation; ``fields`` names the offenders."""

    code = "validation_failed"

    def __init__(self, fields: Iterable[str], message: str | None = None) -> None:
        self.fields = tuple(dict.fromkeys(fields))
        super().__init__(message or f"Validation failed for: {', '.join(self.fields)}")


class MigrationFailedError(NotificationError):
    """A settings migration step could not be completed."""

    code = "migration_failed"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Migration failed: {reason}")
        self.reason = reason


class IngestError(NotificationError):
    """A raw inbound notification could not be turned into a ``Notification``."""

    code = "ingest_error"


class SendFailedError(NotificationError):
    """The reply collaborator failed to send a message."""

    code = "send_failed"


class UnsupportedActionError(NotificationError):
    """A custom action could not be dispatched to any handler."""

    code = "unsupported_action"


__all__ = [
    "DuplicateIdError",
    "IngestError",
    "InvalidTransitionError",
    "MigrationFailedError",
    "NotFoundError",
    "NotificationError",
    "SendFailedError",
    "UnsupportedActionError",
    "ValidationFailedError",
]
