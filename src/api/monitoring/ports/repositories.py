"""Repository protocols (ports) for the monitoring context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from monitoring.domain.aggregates import Probe, Server
from monitoring.domain.alert_history import AlertHistoryEntry
from monitoring.domain.value_objects import ProbeId, ServerId


@runtime_checkable
class IServerRepository(Protocol):
    async def save(self, server: Server) -> None:
        """Insert or update the server and replace its group attachments."""
        ...

    async def get_by_id(self, server_id: ServerId) -> Server | None:
        ...

    async def list_visible(self, group_ids: frozenset[str] | None) -> list[Server]:
        """List servers attached to any of the groups, ordered by name.

        ``None`` lists every server, including those without groups.
        """
        ...

    async def delete(self, server: Server) -> bool:
        """Delete the server after its probes and group attachments."""
        ...


@runtime_checkable
class IProbeRepository(Protocol):
    async def save(self, probe: Probe) -> None:
        """Insert or update the probe, its check sub-row and group attachments."""
        ...

    async def get_by_id(self, probe_id: ProbeId, for_update: bool = False) -> Probe | None:
        """Load a probe; ``for_update`` locks the row until the transaction ends.

        Raises:
            InvariantViolationError: If the sub-row matching the type is missing
        """
        ...

    async def get_by_webhook_token(
        self, token: str, for_update: bool = False
    ) -> Probe | None:
        ...

    async def list_for_server(self, server_id: ServerId) -> list[Probe]:
        """List the server's probes, ordered by name."""
        ...

    async def delete(self, probe: Probe) -> bool:
        """Delete alert history, the check sub-row, group attachments, then the probe."""
        ...


@runtime_checkable
class IAlertHistoryRepository(Protocol):
    async def add(self, entry: AlertHistoryEntry) -> None:
        ...

    async def update(self, entry: AlertHistoryEntry) -> None:
        ...

    async def get_open(self, probe_id: ProbeId) -> AlertHistoryEntry | None:
        """Return the probe's unresolved entry, if any."""
        ...

    async def list_for_probe(
        self, probe_id: ProbeId, limit: int | None = None
    ) -> list[AlertHistoryEntry]:
        """List the probe's entries, most recent first."""
        ...

    async def list_visible(
        self, group_ids: frozenset[str] | None, limit: int | None = None
    ) -> list[AlertHistoryEntry]:
        """List entries of probes attached to any of the groups, most recent first.

        ``None`` lists every entry.
        """
        ...
