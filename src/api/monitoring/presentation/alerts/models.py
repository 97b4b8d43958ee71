"""Pydantic models for alert history responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from monitoring.domain.alert_history import AlertHistoryEntry
from monitoring.domain.value_objects import ProbeStatus


class AlertResponse(BaseModel):
    id: str
    probe_id: str
    status: ProbeStatus
    message: str
    created_at: datetime
    resolved: bool
    resolved_at: datetime | None = None

    @classmethod
    def from_domain(cls, entry: AlertHistoryEntry) -> AlertResponse:
        return cls(
            id=entry.id,
            probe_id=entry.probe_id,
            status=entry.status,
            message=entry.message,
            created_at=entry.created_at,
            resolved=entry.resolved,
            resolved_at=entry.resolved_at,
        )
