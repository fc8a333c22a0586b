"""Validation helpers for notification preference updates."""

from __future__ import annotations

from typing import Any

from blog_notifications.domain.do_not_disturb import is_valid_time
from blog_notifications.domain.entities import (
    InteractionSubtype,
    NotificationFrequency,
    NotificationPreference,
)
from blog_notifications.utils import is_valid_timezone


class PreferenceValidationError(ValueError):
    """Raised when a preference update would store an invalid value."""


_FREQUENCIES = {frequency.value for frequency in NotificationFrequency}
_SUBTYPES = {subtype.value for subtype in InteractionSubtype}


def _ensure_bool(value: Any, field: str) -> None:
    if not isinstance(value, bool):
        raise PreferenceValidationError(f"{field} must be a boolean")


def _ensure_frequency(value: Any, field: str) -> None:
    if getattr(value, "value", value) not in _FREQUENCIES:
        allowed = ", ".join(sorted(_FREQUENCIES))
        raise PreferenceValidationError(f"{field} must be one of: {allowed}")


def _ensure_time(value: Any, field: str, *, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not is_valid_time(value):
        raise PreferenceValidationError(f"{field} must use the HH:MM format")


def validate_preference(preference: NotificationPreference) -> None:
    """Raise :class:`PreferenceValidationError` unless ``preference`` is storable."""

    for name, settings in (("system", preference.system), ("interaction", preference.interaction)):
        _ensure_bool(settings.in_app, f"{name}.in_app")
        _ensure_bool(settings.email, f"{name}.email")
        _ensure_frequency(settings.frequency, f"{name}.frequency")

    for subtype, enabled in preference.interaction.subtypes.items():
        if subtype not in _SUBTYPES:
            raise PreferenceValidationError(f"Unknown interaction subtype: {subtype}")
        _ensure_bool(enabled, f"interaction.subtypes.{subtype}")

    window = preference.do_not_disturb
    _ensure_bool(window.enabled, "do_not_disturb.enabled")
    _ensure_time(window.start, "do_not_disturb.start", optional=True)
    _ensure_time(window.end, "do_not_disturb.end", optional=True)
    if window.enabled and (window.start is None or window.end is None):
        raise PreferenceValidationError(
            "do_not_disturb.start and do_not_disturb.end are required when enabled"
        )
    if not is_valid_timezone(window.timezone):
        raise PreferenceValidationError(f"Unknown timezone: {window.timezone}")

    digest_time = preference.digest_time
    _ensure_time(digest_time.daily, "digest_time.daily")
    _ensure_time(digest_time.weekly_time, "digest_time.weekly_time")
    weekly_day = digest_time.weekly_day
    if isinstance(weekly_day, bool) or not isinstance(weekly_day, int) or not 0 <= weekly_day <= 6:
        raise PreferenceValidationError("digest_time.weekly_day must be between 0 and 6")
