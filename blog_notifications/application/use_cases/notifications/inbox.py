"""User facing inbox operations on stored notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from math import ceil

from sqlalchemy.orm import Session

from blog_notifications.config import get_settings
from blog_notifications.domain.entities import Notification, NotificationType
from blog_notifications.infrastructure.repositories import NotificationRepository
from blog_notifications.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50


class NotificationNotFoundError(ValueError):
    """Raised when a notification does not exist or belongs to another user."""


@dataclass(frozen=True)
class NotificationPage:
    items: Sequence[Notification]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


@dataclass(frozen=True)
class UnreadCount:
    total: int
    by_type: dict[str, int]


def list_notifications(
    session: Session,
    user_id: int,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    notification_type: NotificationType | str | None = None,
    is_read: bool | None = None,
) -> NotificationPage:
    """Return one page of the user's live notifications, newest first.

    ``page`` is clamped to at least 1 and ``limit`` to ``1..MAX_PAGE_SIZE``.
    """

    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    items, total = NotificationRepository(session).list_for_user(
        user_id,
        offset=(page - 1) * limit,
        limit=limit,
        notification_type=NotificationType(notification_type) if notification_type else None,
        is_read=is_read,
    )
    return NotificationPage(items=items, total=total, page=page, limit=limit)


def get_unread_count(session: Session, user_id: int) -> UnreadCount:
    by_type = NotificationRepository(session).count_unread_by_type(user_id)
    return UnreadCount(total=sum(by_type.values()), by_type=by_type)


def mark_as_read(session: Session, notification_id: int, *, user_id: int) -> None:
    if not NotificationRepository(session).mark_as_read(notification_id, user_id=user_id):
        raise NotificationNotFoundError("Notification not found")


def mark_all_as_read(
    session: Session,
    user_id: int,
    *,
    notification_type: NotificationType | str | None = None,
) -> int:
    return NotificationRepository(session).mark_all_as_read(
        user_id,
        notification_type=NotificationType(notification_type) if notification_type else None,
    )


def delete_notification(session: Session, notification_id: int, *, user_id: int) -> None:
    """Soft delete a notification; its pending digest entry is skipped from then on."""

    if not NotificationRepository(session).soft_delete(notification_id, user_id=user_id):
        raise NotificationNotFoundError("Notification not found")


def cleanup_old_notifications(
    session: Session, *, days: int | None = None, now: datetime | None = None
) -> int:
    """Physically delete notifications older than ``days`` (retention setting by default)."""

    if days is None:
        days = get_settings().notification_retention_days
    if days <= 0:
        raise ValueError("days must be positive")
    cutoff = (now or now_in_app_timezone()) - timedelta(days=days)
    deleted = NotificationRepository(session).delete_created_before(cutoff)
    logger.info("Removed %s notifications older than %s days", deleted, days)
    return deleted
