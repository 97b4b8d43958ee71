"""Domain probe for monitoring repository operations."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class MonitoringRepositoryProbe(Protocol):
    """Domain probe for server, probe and alert history persistence."""

    def server_saved(self, server_id: str, group_count: int) -> None:
        ...

    def server_deleted(self, server_id: str) -> None:
        ...

    def probe_saved(self, probe_id: str, probe_type: str, event_count: int) -> None:
        ...

    def probe_type_switched(self, probe_id: str, old_type: str, new_type: str) -> None:
        """Record that a probe's settings moved to the other sub-table."""
        ...

    def probe_deleted(self, probe_id: str, alert_count: int) -> None:
        ...

    def with_context(self, context: ObservationContext) -> MonitoringRepositoryProbe:
        ...


class DefaultMonitoringRepositoryProbe(StructlogProbe):
    def server_saved(self, server_id: str, group_count: int) -> None:
        self._log.debug(
            "server_saved",
            server_id=server_id,
            group_count=group_count,
        )

    def server_deleted(self, server_id: str) -> None:
        self._log.debug(
            "server_row_deleted", server_id=server_id
        )

    def probe_saved(self, probe_id: str, probe_type: str, event_count: int) -> None:
        self._log.debug(
            "probe_saved",
            probe_id=probe_id,
            probe_type=probe_type,
            event_count=event_count,
        )

    def probe_type_switched(self, probe_id: str, old_type: str, new_type: str) -> None:
        self._log.info(
            "probe_type_switched",
            probe_id=probe_id,
            old_type=old_type,
            new_type=new_type,
        )

    def probe_deleted(self, probe_id: str, alert_count: int) -> None:
        self._log.debug(
            "probe_row_deleted",
            probe_id=probe_id,
            alert_count=alert_count,
        )
