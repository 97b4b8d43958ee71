"""Aggregates and entities for the notifications bounded context."""

from notifications.domain.aggregates.notification import Notification
from notifications.domain.aggregates.notification_config import NotificationConfig

__all__ = ["Notification", "NotificationConfig"]
