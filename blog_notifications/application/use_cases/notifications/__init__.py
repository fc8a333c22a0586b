"""Public helpers for emitting and managing notifications."""

from .broadcast import BroadcastRequestError, BroadcastResult, broadcast_system_notification
from .engine import Clock, NotificationEngine
from .inbox import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    NotificationNotFoundError,
    NotificationPage,
    UnreadCount,
    cleanup_old_notifications,
    delete_notification,
    get_unread_count,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
)
from .producers import notify_interaction, notify_system

__all__ = [
    "BroadcastRequestError",
    "BroadcastResult",
    "Clock",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "NotificationEngine",
    "NotificationNotFoundError",
    "NotificationPage",
    "UnreadCount",
    "broadcast_system_notification",
    "cleanup_old_notifications",
    "delete_notification",
    "get_unread_count",
    "list_notifications",
    "mark_all_as_read",
    "mark_as_read",
    "notify_interaction",
    "notify_system",
]
