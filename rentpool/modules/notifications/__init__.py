"""Notifications module."""

from rentpool.modules.notifications.models import NotificationItem
from rentpool.modules.notifications.repository import NotificationRepository

__all__ = [
    "NotificationItem",
    "NotificationRepository",
]
