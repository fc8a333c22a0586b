"""Domain entity for notifications deferred into an email digest."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DigestType(str, Enum):
    """Kind of digest a queued notification belongs to."""

    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass
class DigestQueueEntry:
    """A notification waiting for the next digest sweep of its kind."""

    id: int | None
    user_id: int
    notification_id: int
    digest_type: DigestType
    scheduled_at: datetime
    is_sent: bool = False
    sent_at: datetime | None = None
    error_message: str | None = None
    retry_count: int = 0
    created_at: datetime | None = None


__all__ = ["DigestQueueEntry", "DigestType"]
