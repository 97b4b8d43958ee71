"""Domain-Oriented Observability for the monitoring application layer."""

from monitoring.application.observability.server_service_probe import (
    DefaultServerServiceProbe,
    ServerServiceProbe,
)
from monitoring.application.observability.status_tracker_probe import (
    DefaultStatusTrackerProbe,
    StatusTrackerProbe,
)

__all__ = [
    "ServerServiceProbe",
    "DefaultServerServiceProbe",
    "StatusTrackerProbe",
    "DefaultStatusTrackerProbe",
]
