"""Domain-Oriented Observability for monitoring infrastructure."""

from monitoring.infrastructure.observability.repository_probe import (
    DefaultMonitoringRepositoryProbe,
    MonitoringRepositoryProbe,
)

__all__ = [
    "DefaultMonitoringRepositoryProbe",
    "MonitoringRepositoryProbe",
]
