"""Websocket subscriptions to a user's notification inbox."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import WebSocket

from blog_notifications.domain.entities import Notification

logger = logging.getLogger(__name__)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "subtype": getattr(notification.subtype, "value", notification.subtype),
        "title": notification.title,
        "content": notification.content,
        "related_data": notification.related_data or {},
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


def init_frame(unread_total: int, unread_by_type: Mapping[str, int]) -> dict[str, Any]:
    return {"type": "init", "data": {"unread": unread_total, "by_type": dict(unread_by_type)}}


def notification_frame(notification: Notification) -> dict[str, Any]:
    return {"type": "notification", "data": serialize_notification(notification)}


class NotificationConnectionManager:
    """Inbox subscribers keyed by user id.

    A user may hold several sockets (one per open tab). Every socket receives
    an ``init`` frame with the unread counters on subscribe and a
    ``notification`` frame for each notification pushed afterwards. Sockets
    that fail a send are unsubscribed.
    """

    def __init__(self) -> None:
        self._subscribers: dict[int, list[WebSocket]] = {}

    async def connect(
        self,
        user_id: int,
        websocket: WebSocket,
        *,
        unread_total: int = 0,
        unread_by_type: Mapping[str, int] | None = None,
    ) -> None:
        await websocket.accept()
        self._subscribers.setdefault(user_id, []).append(websocket)
        await websocket.send_json(init_frame(unread_total, unread_by_type or {}))

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        sockets = self._subscribers.get(user_id)
        if not sockets or websocket not in sockets:
            return
        sockets.remove(websocket)
        if not sockets:
            del self._subscribers[user_id]

    def is_connected(self, user_id: int) -> bool:
        return user_id in self._subscribers

    def connection_count(self, user_id: int) -> int:
        return len(self._subscribers.get(user_id, ()))

    async def push(self, notification: Notification) -> int:
        """Send ``notification`` to its owner's sockets; return how many received it."""

        frame = notification_frame(notification)
        delivered = 0
        for websocket in list(self._subscribers.get(notification.user_id, ())):
            try:
                await websocket.send_json(frame)
            except Exception:  # pragma: no cover - socket closed mid-send
                logger.debug(
                    "Dropping websocket of user %s after failed push of notification %s",
                    notification.user_id,
                    notification.id,
                )
                self.disconnect(notification.user_id, websocket)
            else:
                delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = [
    "NotificationConnectionManager",
    "init_frame",
    "notification_frame",
    "notification_manager",
    "serialize_notification",
]
