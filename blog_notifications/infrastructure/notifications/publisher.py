"""Push freshly stored notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
from typing import Protocol

from anyio import from_thread

from blog_notifications.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager


class InAppPublisher(Protocol):
    def dispatch(self, notification: Notification) -> None: ...


class NotificationPublisher:
    """Schedule pushes on the event loop that owns the websockets."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` for its user's open websockets, if any."""

        if not self._manager.is_connected(notification.user_id):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called from a worker thread of a synchronous route.
            from_thread.run(self._manager.push, notification)
        else:
            loop.create_task(self._manager.push(notification))


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "InAppPublisher",
    "NotificationPublisher",
    "notification_publisher",
]
