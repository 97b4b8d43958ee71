"""Ports for the notifications bounded context."""

from notifications.ports.channels import EmailSender, WebhookSender
from notifications.ports.repositories import (
    IMonitoredObjectLookup,
    INotificationConfigRepository,
    INotificationRepository,
    INotificationStore,
)

__all__ = [
    "EmailSender",
    "IMonitoredObjectLookup",
    "INotificationConfigRepository",
    "INotificationRepository",
    "INotificationStore",
    "WebhookSender",
]
