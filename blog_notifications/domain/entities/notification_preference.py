"""Domain entity describing how a user wants to be notified."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NotificationFrequency(str, Enum):
    """Delivery cadence configured for a notification type."""

    REALTIME = "realtime"
    DAILY = "daily"
    WEEKLY = "weekly"
    OFF = "off"


class InteractionSubtype(str, Enum):
    """Interaction subtypes that can be toggled individually."""

    COMMENT = "comment"
    LIKE = "like"
    FAVORITE = "favorite"
    MENTION = "mention"
    REPLY = "reply"
    FOLLOW = "follow"


DEFAULT_DND_START = "22:00"
DEFAULT_DND_END = "08:00"
DEFAULT_DND_TIMEZONE = "Asia/Shanghai"
DEFAULT_DAILY_DIGEST_TIME = "09:00"
DEFAULT_WEEKLY_DIGEST_DAY = 1
DEFAULT_WEEKLY_DIGEST_TIME = "09:00"


@dataclass
class ChannelSettings:
    """Channel toggles and cadence for one notification type."""

    in_app: bool = True
    email: bool = True
    frequency: NotificationFrequency = NotificationFrequency.REALTIME


def _default_subtypes() -> dict[str, bool]:
    return {subtype.value: True for subtype in InteractionSubtype}


@dataclass
class InteractionSettings(ChannelSettings):
    """Interaction settings additionally carry per-subtype toggles."""

    subtypes: dict[str, bool] = field(default_factory=_default_subtypes)


@dataclass
class DoNotDisturbWindow:
    """Daily window, in ``HH:MM`` local time, that silences the email channel."""

    enabled: bool = False
    start: str | None = DEFAULT_DND_START
    end: str | None = DEFAULT_DND_END
    timezone: str = DEFAULT_DND_TIMEZONE


@dataclass
class DigestTime:
    """When daily and weekly digests are sent.

    ``weekly_day`` counts from Sunday (0) to Saturday (6).
    """

    daily: str = DEFAULT_DAILY_DIGEST_TIME
    weekly_day: int = DEFAULT_WEEKLY_DIGEST_DAY
    weekly_time: str = DEFAULT_WEEKLY_DIGEST_TIME


@dataclass
class NotificationPreference:
    """Notification configuration of a single user."""

    user_id: int
    system: ChannelSettings = field(default_factory=ChannelSettings)
    interaction: InteractionSettings = field(default_factory=InteractionSettings)
    do_not_disturb: DoNotDisturbWindow = field(default_factory=DoNotDisturbWindow)
    digest_time: DigestTime = field(default_factory=DigestTime)
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def settings_for(self, notification_type: str) -> ChannelSettings:
        """Return the channel settings matching ``notification_type``."""

        if notification_type == "system":
            return self.system
        if notification_type == "interaction":
            return self.interaction
        raise ValueError(f"Unknown notification type: {notification_type!r}")


__all__ = [
    "ChannelSettings",
    "DigestTime",
    "DoNotDisturbWindow",
    "InteractionSettings",
    "InteractionSubtype",
    "NotificationFrequency",
    "NotificationPreference",
]
