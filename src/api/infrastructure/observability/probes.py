"""Probes for process-level infrastructure: the engine and the app lifecycle."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class DatabaseProbe(Protocol):
    def engine_created(self, host: str, database: str, pool_size: int) -> None: ...

    def engine_disposed(self) -> None: ...

    def with_context(self, context: ObservationContext) -> DatabaseProbe: ...


class DefaultDatabaseProbe(StructlogProbe):
    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        self._log.info(
            "database_engine_created", host=host, database=database, pool_size=pool_size
        )

    def engine_disposed(self) -> None:
        self._log.info("database_engine_disposed")


class ApplicationProbe(Protocol):
    """Startup, shutdown and requests that hit corrupt persisted state."""

    def application_started(self, outbox_worker_enabled: bool) -> None: ...

    def application_stopped(self) -> None: ...

    def unhandled_invariant_violation(self, path: str, error: str) -> None:
        """Record a stored row that no longer satisfies its aggregate's rules."""
        ...


class DefaultApplicationProbe(StructlogProbe):
    def application_started(self, outbox_worker_enabled: bool) -> None:
        self._log.info(
            "application_started", outbox_worker_enabled=outbox_worker_enabled
        )

    def application_stopped(self) -> None:
        self._log.info("application_stopped")

    def unhandled_invariant_violation(self, path: str, error: str) -> None:
        self._log.error("invariant_violation", path=path, error=error)
