"""Aggregate application use cases."""

from .digests import DigestDispatcher, SweepResult
from .notification_preferences import get_preferences, update_preferences
from .notifications import NotificationEngine, notify_interaction, notify_system

__all__ = [
    "DigestDispatcher",
    "NotificationEngine",
    "SweepResult",
    "get_preferences",
    "notify_interaction",
    "notify_system",
    "update_preferences",
]
