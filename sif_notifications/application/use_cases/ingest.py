"""Entry point used by push and in-app delivery to hand notifications to the engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

from pydantic import ValidationError

from sif_notifications.domain.entities import Notification
from sif_notifications.domain.errors import DuplicateIdError, IngestError
from sif_notifications.schemas import RawNotification
from sif_notifications.utils import now_in_app_timezone

from .settings.controller import GatingDecision, SettingsController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestOutcome:
    notification_id: str
    decision: GatingDecision
    notification: Notification | None

    @property
    def stored(self) -> bool:
        return self.notification is not None


def parse_raw_notification(
    raw: Mapping[str, Any], *, now: datetime, tz: tzinfo | None = None
) -> Notification:
    """Validate ``raw`` into a :class:`Notification` or raise :class:`IngestError`."""

    try:
        return RawNotification.model_validate(dict(raw)).to_entity(now=now, tz=tz)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
        raise IngestError(f"Invalid notification payload: {', '.join(fields)}") from exc
    except ValueError as exc:
        raise IngestError(f"Invalid notification payload: {exc}") from exc


class NotificationIngestor:
    """Validate raw notifications and route them through the settings gate."""

    def __init__(self, controller: SettingsController, *, tz: tzinfo | None = None) -> None:
        self._controller = controller
        self._tz = tz

    def ingest(self, raw: Mapping[str, Any], now: datetime | None = None) -> IngestOutcome:
        now = now or now_in_app_timezone()
        notification = parse_raw_notification(raw, now=now, tz=self._tz)
        if notification.recipient_id != self._controller.settings.uid:
            raise IngestError(
                f"Notification {notification.id} is addressed to another user"
            )
        try:
            decision, stored = self._controller.receive(notification, now)
        except DuplicateIdError as exc:
            raise IngestError(f"Notification {notification.id} was already received") from exc
        if stored is not None:
            logger.debug("Stored notification %s (%s)", stored.id, decision.reason.value)
        return IngestOutcome(notification.id, decision, stored)


__all__ = ["IngestOutcome", "NotificationIngestor", "parse_raw_notification"]
