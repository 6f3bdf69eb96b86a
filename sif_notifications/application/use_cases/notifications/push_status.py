"""Read the OS notification permission and push token."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .collaborators import PermissionStatus, PushPermissions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushStatus:
    granted: bool
    token: str | None

    @property
    def can_receive_push(self) -> bool:
        return self.granted and bool(self.token)


async def refresh_push_status(permissions: PushPermissions) -> PushStatus:
    """Ask for permission and report whether push delivery is possible."""

    status = await permissions.request_permission()
    granted = status is PermissionStatus.GRANTED
    token = permissions.current_token() if granted else None
    if granted and not token:
        logger.info("Notification permission granted but no push token is available yet")
    return PushStatus(granted=granted, token=token)


__all__ = ["PushStatus", "refresh_push_status"]
