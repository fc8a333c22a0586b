"""ORM models used by the application infrastructure."""

from .user import UserModel
from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel
from .digest_queue_entry import DigestQueueEntryModel

__all__ = [
    "DigestQueueEntryModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "UserModel",
]
