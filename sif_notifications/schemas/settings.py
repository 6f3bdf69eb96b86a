"""Pydantic model used to validate persisted notification settings records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

QUIET_HOURS_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"


class NotificationSettingsRecord(BaseModel):
    """Complete, current-version settings record.

    Unknown keys are allowed and preserved so newer clients can add fields
    without older ones discarding them.
    """

    model_config = ConfigDict(extra="allow")

    uid: str = Field(..., min_length=1)
    version: StrictInt = Field(..., ge=0)
    last_updated: datetime
    is_enabled: StrictBool
    sound_enabled: StrictBool
    badge_enabled: StrictBool
    sif_notifications_enabled: StrictBool
    social_notifications_enabled: StrictBool
    system_notifications_enabled: StrictBool
    template_notifications_enabled: StrictBool
    achievement_notifications_enabled: StrictBool
    quiet_hours_enabled: StrictBool
    quiet_hours_start: str = Field(..., pattern=QUIET_HOURS_PATTERN)
    quiet_hours_end: str = Field(..., pattern=QUIET_HOURS_PATTERN)


__all__ = ["NotificationSettingsRecord", "QUIET_HOURS_PATTERN"]
