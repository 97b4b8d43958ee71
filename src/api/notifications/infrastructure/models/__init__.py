"""SQLAlchemy ORM models for the notifications bounded context."""

from notifications.infrastructure.models.notification import NotificationModel
from notifications.infrastructure.models.notification_config import (
    EmailNotificationModel,
    NotificationConfigModel,
    WebhookNotificationModel,
)

__all__ = [
    "EmailNotificationModel",
    "NotificationConfigModel",
    "NotificationModel",
    "WebhookNotificationModel",
]
