"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Top level category a notification belongs to."""

    SYSTEM = "system"
    INTERACTION = "interaction"


class NotificationSubtype(str, Enum):
    """Finer grained category of a notification."""

    MAINTENANCE = "maintenance"
    UPDATE = "update"
    ANNOUNCEMENT = "announcement"
    COMMENT = "comment"
    LIKE = "like"
    FAVORITE = "favorite"
    MENTION = "mention"
    REPLY = "reply"
    FOLLOW = "follow"


class NotificationChannel(str, Enum):
    """Channels a notification can be delivered through."""

    IN_APP = "in_app"
    EMAIL = "email"


SYSTEM_SUBTYPES = frozenset(
    {
        NotificationSubtype.MAINTENANCE,
        NotificationSubtype.UPDATE,
        NotificationSubtype.ANNOUNCEMENT,
    }
)


def coerce_subtype(
    value: NotificationSubtype | str | None,
) -> NotificationSubtype | str | None:
    """Return the enum member for a known subtype and the raw string otherwise."""

    if not value:
        return None
    try:
        return NotificationSubtype(value)
    except ValueError:
        return str(value)


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    type: NotificationType
    title: str
    subtype: NotificationSubtype | str | None = None
    content: str | None = None
    related_data: dict[str, Any] = field(default_factory=dict)
    is_in_app_sent: bool = False
    is_email_sent: bool = False
    is_read: bool = False
    read_at: datetime | None = None
    deleted_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class NotificationEvent:
    """Raw event handed to the engine by a producer (comment, like, ...)."""

    user_id: int
    type: NotificationType | str
    title: str
    subtype: NotificationSubtype | str | None = None
    content: str | None = None
    related_data: dict[str, Any] | None = None


@dataclass(frozen=True)
class DeliveryOptions:
    """Per call switches that force a channel off."""

    skip_in_app: bool = False
    skip_email: bool = False


__all__ = [
    "DeliveryOptions",
    "Notification",
    "NotificationChannel",
    "NotificationEvent",
    "NotificationSubtype",
    "NotificationType",
    "SYSTEM_SUBTYPES",
    "coerce_subtype",
]
