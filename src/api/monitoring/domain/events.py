"""Domain events for the monitoring context.

Events are immutable and carry only primitive values so they can be
serialized into the outbox without reference to the aggregates.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ServerDeleted:
    server_id: str
    name: str
    occurred_at: datetime


@dataclass(frozen=True)
class ProbeStatusChanged:
    """A probe's status changed.

    Carries a snapshot of the server's groups at the time of the change:
    the notification configurations of those groups are alerted.
    """

    probe_id: str
    probe_name: str
    server_id: str
    server_name: str
    server_group_ids: tuple[str, ...]
    old_status: str
    new_status: str
    message: str
    occurred_at: datetime


DomainEvent = ServerDeleted | ProbeStatusChanged
