"""Domain entities exposed by the application."""

from .digest_queue_entry import DigestQueueEntry, DigestType
from .notification import (
    SYSTEM_SUBTYPES,
    coerce_subtype,
    DeliveryOptions,
    Notification,
    NotificationChannel,
    NotificationEvent,
    NotificationSubtype,
    NotificationType,
)
from .notification_preference import (
    ChannelSettings,
    DigestTime,
    DoNotDisturbWindow,
    InteractionSettings,
    InteractionSubtype,
    NotificationFrequency,
    NotificationPreference,
)
from .recipient import Recipient

__all__ = [
    "ChannelSettings",
    "DeliveryOptions",
    "DigestQueueEntry",
    "DigestTime",
    "DigestType",
    "DoNotDisturbWindow",
    "InteractionSettings",
    "InteractionSubtype",
    "Notification",
    "NotificationChannel",
    "NotificationEvent",
    "NotificationFrequency",
    "NotificationPreference",
    "NotificationSubtype",
    "NotificationType",
    "Recipient",
    "SYSTEM_SUBTYPES",
    "coerce_subtype",
]
