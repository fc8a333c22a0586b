"""Schemas for notification preference endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from blog_notifications.domain.entities import NotificationFrequency


class ChannelSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    in_app: bool
    email: bool
    frequency: NotificationFrequency


class InteractionSettingsRead(ChannelSettingsRead):
    subtypes: dict[str, bool]


class DoNotDisturbRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enabled: bool
    start: str | None
    end: str | None
    timezone: str


class DigestTimeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    daily: str
    weekly_day: int
    weekly_time: str


class NotificationSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    system: ChannelSettingsRead
    interaction: InteractionSettingsRead
    do_not_disturb: DoNotDisturbRead
    digest_time: DigestTimeRead


class _PartialModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ChannelSettingsUpdate(_PartialModel):
    in_app: bool | None = None
    email: bool | None = None
    frequency: NotificationFrequency | None = None


class InteractionSubtypesUpdate(_PartialModel):
    comment: bool | None = None
    like: bool | None = None
    favorite: bool | None = None
    mention: bool | None = None
    reply: bool | None = None
    follow: bool | None = None


class InteractionSettingsUpdate(ChannelSettingsUpdate):
    subtypes: InteractionSubtypesUpdate | None = None


class DoNotDisturbUpdate(_PartialModel):
    enabled: bool | None = None
    start: str | None = None
    end: str | None = None
    timezone: str | None = None


class DigestTimeUpdate(_PartialModel):
    daily: str | None = None
    weekly_day: int | None = None
    weekly_time: str | None = None


class NotificationSettingsUpdate(_PartialModel):
    """Partial update; only the fields present in the request body change."""

    system: ChannelSettingsUpdate | None = None
    interaction: InteractionSettingsUpdate | None = None
    do_not_disturb: DoNotDisturbUpdate | None = None
    digest_time: DigestTimeUpdate | None = None

    def to_changes(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


class DoNotDisturbStatusRead(BaseModel):
    enabled: bool
    is_active: bool
    description: str
    start: str | None
    end: str | None
    timezone: str
    minutes_until_end: int


__all__ = [
    "DoNotDisturbStatusRead",
    "NotificationSettingsRead",
    "NotificationSettingsUpdate",
]
