"""Application services for the notifications context."""

from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.application.services.notification_config_service import (
    NotificationConfigService,
)
from notifications.application.services.notification_service import (
    NotificationService,
)
from notifications.application.services.probe_alert_handler import ProbeAlertHandler

__all__ = [
    "NotificationConfigService",
    "NotificationDispatcher",
    "NotificationService",
    "ProbeAlertHandler",
]
