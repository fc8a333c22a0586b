"""Realtime notification helpers for the infrastructure layer."""

from .manager import (
    NotificationConnectionManager,
    notification_manager,
    serialize_notification,
)
from .publisher import InAppPublisher, NotificationPublisher, notification_publisher

__all__ = [
    "InAppPublisher",
    "NotificationConnectionManager",
    "notification_manager",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
