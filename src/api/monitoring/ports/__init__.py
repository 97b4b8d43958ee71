"""Ports (interfaces) for the monitoring context."""

from monitoring.ports.repositories import (
    IAlertHistoryRepository,
    IProbeRepository,
    IServerRepository,
)

__all__ = [
    "IAlertHistoryRepository",
    "IProbeRepository",
    "IServerRepository",
]
