"""Shortcuts used by content services to emit notifications."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from blog_notifications.domain.entities import (
    DeliveryOptions,
    Notification,
    NotificationEvent,
    NotificationSubtype,
    NotificationType,
)

from .engine import NotificationEngine


def notify_interaction(
    session: Session,
    *,
    user_id: int,
    subtype: NotificationSubtype | str,
    title: str,
    content: str | None = None,
    related_data: dict[str, Any] | None = None,
    engine: NotificationEngine | None = None,
) -> Notification | None:
    """Notify ``user_id`` about a comment, like, favorite, mention or reply."""

    engine = engine or NotificationEngine(session)
    return engine.deliver(
        NotificationEvent(
            user_id=user_id,
            type=NotificationType.INTERACTION,
            subtype=subtype,
            title=title,
            content=content,
            related_data=related_data,
        )
    )


def notify_system(
    session: Session,
    *,
    user_id: int,
    title: str,
    content: str | None = None,
    subtype: NotificationSubtype | str = NotificationSubtype.ANNOUNCEMENT,
    related_data: dict[str, Any] | None = None,
    skip_in_app: bool = False,
    skip_email: bool = False,
    engine: NotificationEngine | None = None,
) -> Notification | None:
    engine = engine or NotificationEngine(session)
    return engine.deliver(
        NotificationEvent(
            user_id=user_id,
            type=NotificationType.SYSTEM,
            subtype=subtype,
            title=title,
            content=content,
            related_data=related_data,
        ),
        DeliveryOptions(skip_in_app=skip_in_app, skip_email=skip_email),
    )
