"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    local_date,
    local_time,
    now_in_app_timezone,
    reset_app_timezone_cache,
)

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "local_date",
    "local_time",
    "now_in_app_timezone",
    "reset_app_timezone_cache",
]
