"""Outbox integration for the monitoring bounded context."""

from monitoring.infrastructure.outbox.serializer import MonitoringEventSerializer

__all__ = ["MonitoringEventSerializer"]
