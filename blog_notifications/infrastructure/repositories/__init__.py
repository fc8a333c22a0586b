"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .notification_preference_repository import NotificationPreferenceRepository
from .digest_queue_repository import DigestQueueRepository
from .user_repository import UserRepository

__all__ = [
    "DigestQueueRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "UserRepository",
]
