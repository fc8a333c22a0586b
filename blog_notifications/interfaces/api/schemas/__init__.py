from .notification import (
    BroadcastRequest,
    BroadcastResponse,
    DigestStatsResponse,
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    PaginationRead,
    UnreadCountResponse,
)
from .notification_settings import (
    DoNotDisturbStatusRead,
    NotificationSettingsRead,
    NotificationSettingsUpdate,
)

__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "DigestStatsResponse",
    "DoNotDisturbStatusRead",
    "MarkAllReadResponse",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationSettingsRead",
    "NotificationSettingsUpdate",
    "PaginationRead",
    "UnreadCountResponse",
]
