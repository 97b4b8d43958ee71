"""Domain-Oriented Observability for notifications infrastructure."""

from notifications.infrastructure.observability.repository_probe import (
    DefaultNotificationsInfrastructureProbe,
    NotificationsInfrastructureProbe,
)

__all__ = [
    "DefaultNotificationsInfrastructureProbe",
    "NotificationsInfrastructureProbe",
]
