"""Alert history ledger entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ulid import ULID

from monitoring.domain.value_objects import ProbeStatus


@dataclass
class AlertHistoryEntry:
    """A probe's move into WARNING or ERROR.

    At most one entry per probe is unresolved at any time; it is
    resolved when the probe returns to OK or escalates to another
    alerting status.
    """

    id: str
    probe_id: str
    status: ProbeStatus
    message: str
    created_at: datetime
    resolved: bool = False
    resolved_at: datetime | None = None

    @classmethod
    def open(
        cls, probe_id: str, status: ProbeStatus, message: str, at: datetime
    ) -> AlertHistoryEntry:
        if not status.is_alerting:
            raise ValueError(f"Alert history entries record alerts, not {status}")
        return cls(
            id=str(ULID()),
            probe_id=probe_id,
            status=status,
            message=message,
            created_at=at,
        )

    def resolve(self, at: datetime) -> None:
        if self.resolved:
            return
        self.resolved = True
        self.resolved_at = at
