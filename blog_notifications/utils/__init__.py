"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    is_valid_timezone,
    now_in_app_timezone,
    resolve_timezone,
    to_user_timezone,
)

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "is_valid_timezone",
    "now_in_app_timezone",
    "resolve_timezone",
    "to_user_timezone",
]
