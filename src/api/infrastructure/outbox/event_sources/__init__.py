"""Wake-up sources for the outbox worker."""

from infrastructure.outbox.event_sources.postgres_notify import (
    PostgresNotifyEventSource,
)

__all__ = ["PostgresNotifyEventSource"]
