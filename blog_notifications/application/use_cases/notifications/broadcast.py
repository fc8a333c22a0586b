"""Use case for admin announcements sent to many users at once."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from blog_notifications.config import get_settings
from blog_notifications.domain.entities import (
    DeliveryOptions,
    NotificationChannel,
    NotificationEvent,
    NotificationSubtype,
    NotificationType,
)
from blog_notifications.infrastructure.repositories import UserRepository

from .engine import NotificationEngine

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 10


class BroadcastRequestError(ValueError):
    """Raised when a broadcast request cannot be accepted."""


@dataclass
class BroadcastResult:
    sent_count: int = 0
    failed_count: int = 0
    errors: list[str] = field(default_factory=list)

    def record_failure(self, message: str) -> None:
        self.failed_count += 1
        if len(self.errors) < MAX_REPORTED_ERRORS:
            self.errors.append(message)


def _parse_channels(channels: Iterable[str]) -> set[NotificationChannel]:
    parsed: set[NotificationChannel] = set()
    invalid: list[str] = []
    for channel in channels:
        try:
            parsed.add(NotificationChannel(channel))
        except ValueError:
            invalid.append(str(channel))
    if invalid:
        raise BroadcastRequestError(f"Invalid channels: {', '.join(invalid)}")
    if not parsed:
        raise BroadcastRequestError("At least one channel is required")
    return parsed


def broadcast_system_notification(
    session: Session,
    *,
    title: str,
    content: str | None = None,
    channels: Iterable[str],
    user_ids: Sequence[int] | None = None,
    engine: NotificationEngine | None = None,
) -> BroadcastResult:
    """Deliver a ``system/announcement`` notification to ``user_ids``.

    ``user_ids=None`` targets every active user. Each target goes through the
    regular delivery rules, so users who turned system notifications off are
    reported as failures.
    """

    if not title or not title.strip():
        raise BroadcastRequestError("Title is required")
    selected = _parse_channels(channels)

    users = UserRepository(session)
    if user_ids is None:
        targets = list(users.list_active_ids())
    else:
        if not user_ids:
            raise BroadcastRequestError("User IDs are required")
        targets = list(dict.fromkeys(user_ids))

    limit = get_settings().admin_broadcast_limit
    if len(targets) > limit:
        raise BroadcastRequestError(f"Too many target users (maximum {limit})")

    result = BroadcastResult()
    if not targets:
        return result

    known = users.get_map_by_ids(targets)
    engine = engine or NotificationEngine(session)
    options = DeliveryOptions(
        skip_in_app=NotificationChannel.IN_APP not in selected,
        skip_email=NotificationChannel.EMAIL not in selected,
    )

    for user_id in targets:
        if user_id not in known:
            result.record_failure(f"User {user_id}: not found")
            continue
        notification = engine.deliver(
            NotificationEvent(
                user_id=user_id,
                type=NotificationType.SYSTEM,
                subtype=NotificationSubtype.ANNOUNCEMENT,
                title=title,
                content=content,
            ),
            options,
        )
        if notification is None:
            result.record_failure(f"User {user_id}: notification not created")
        else:
            result.sent_count += 1

    logger.info(
        "Broadcast %r to %s users: %s sent, %s failed",
        title,
        len(targets),
        result.sent_count,
        result.failed_count,
    )
    return result
