"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from blog_notifications.domain.entities import NotificationSubtype, NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: NotificationType
    subtype: NotificationSubtype | str | None = None
    title: str
    content: str | None = None
    related_data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    is_in_app_sent: bool
    is_email_sent: bool
    read_at: datetime | None = None
    created_at: datetime


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class NotificationListResponse(BaseModel):
    items: list[NotificationRead]
    pagination: PaginationRead


class UnreadCountResponse(BaseModel):
    total: int
    by_type: dict[str, int]


class MarkAllReadResponse(BaseModel):
    updated: int


class BroadcastRequest(BaseModel):
    """Payload of an admin announcement."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=200)
    content: str | None = None
    target: Literal["all", "specific_users"] = "all"
    user_ids: list[int] = Field(default_factory=list)
    channels: list[str] = Field(..., min_length=1)


class BroadcastResponse(BaseModel):
    sent_count: int
    failed_count: int
    errors: list[str] = Field(default_factory=list)


class DigestQueueStats(BaseModel):
    pending: int
    sent: int


class DigestStatsResponse(BaseModel):
    daily: DigestQueueStats
    weekly: DigestQueueStats


__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "DigestQueueStats",
    "DigestStatsResponse",
    "MarkAllReadResponse",
    "NotificationListResponse",
    "NotificationRead",
    "PaginationRead",
    "UnreadCountResponse",
]
