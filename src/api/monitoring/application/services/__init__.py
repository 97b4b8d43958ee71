"""Application services for the monitoring context."""

from monitoring.application.services.probe_service import ProbeService
from monitoring.application.services.server_service import ServerService
from monitoring.application.services.status_tracker import ProbeStatusTracker

__all__ = ["ProbeService", "ProbeStatusTracker", "ServerService"]
