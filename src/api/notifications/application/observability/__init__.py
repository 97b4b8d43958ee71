"""Domain-Oriented Observability for the notifications application layer."""

from notifications.application.observability.config_service_probe import (
    DefaultNotificationConfigServiceProbe,
    NotificationConfigServiceProbe,
)
from notifications.application.observability.dispatch_probe import (
    DefaultDispatchProbe,
    DispatchProbe,
)

__all__ = [
    "DefaultDispatchProbe",
    "DefaultNotificationConfigServiceProbe",
    "DispatchProbe",
    "NotificationConfigServiceProbe",
]
