"""Monitoring aggregates."""

from monitoring.domain.aggregates.probe import Probe, StatusTransition
from monitoring.domain.aggregates.server import Server

__all__ = ["Probe", "Server", "StatusTransition"]
