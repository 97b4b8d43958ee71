"""Domain probe for server and probe definition management."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class ServerServiceProbe(Protocol):
    def server_created(self, server_id: str, name: str, group_ids: list[str]) -> None:
        ...

    def server_updated(self, server_id: str) -> None:
        ...

    def server_deleted(self, server_id: str, probe_count: int) -> None:
        ...

    def probe_created(self, probe_id: str, server_id: str, probe_type: str) -> None:
        ...

    def probe_updated(self, probe_id: str, probe_type: str) -> None:
        ...

    def probe_deleted(self, probe_id: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> ServerServiceProbe:
        ...


class DefaultServerServiceProbe(StructlogProbe):
    def server_created(self, server_id: str, name: str, group_ids: list[str]) -> None:
        self._log.info(
            "server_created",
            server_id=server_id,
            name=name,
            group_ids=group_ids,
        )

    def server_updated(self, server_id: str) -> None:
        self._log.info(
            "server_updated", server_id=server_id
        )

    def server_deleted(self, server_id: str, probe_count: int) -> None:
        self._log.info(
            "server_deleted",
            server_id=server_id,
            probe_count=probe_count,
        )

    def probe_created(self, probe_id: str, server_id: str, probe_type: str) -> None:
        self._log.info(
            "probe_created",
            probe_id=probe_id,
            server_id=server_id,
            probe_type=probe_type,
        )

    def probe_updated(self, probe_id: str, probe_type: str) -> None:
        self._log.info(
            "probe_updated",
            probe_id=probe_id,
            probe_type=probe_type,
        )

    def probe_deleted(self, probe_id: str) -> None:
        self._log.info(
            "probe_deleted", probe_id=probe_id
        )
