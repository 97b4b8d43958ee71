"""Protocols (ports) for the transactional outbox.

These protocols let each bounded context register its own event
serializers and handlers without shared_kernel knowing about them.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID


@runtime_checkable
class IOutboxRepository(Protocol):
    """Repository for appending events to the outbox.

    The repository shares the caller's database session, so an event is
    only ever visible to the worker if the state change that produced it
    was committed.
    """

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
    ) -> None:
        """Append a pre-serialized event within the current transaction.

        Args:
            event_type: Name of the domain event type (e.g., "ProbeStatusChanged")
            payload: Pre-serialized event data
            occurred_at: When the domain event occurred
            aggregate_type: Type of aggregate (e.g., "probe")
            aggregate_id: Identifier of the aggregate
        """
        ...


@runtime_checkable
class EventSerializer(Protocol):
    """Turns one context's domain events into outbox payloads."""

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this serializer handles."""
        ...

    def serialize(self, event: Any) -> dict[str, Any]:
        """Convert a domain event to a JSON-serializable dictionary.

        Raises:
            ValueError: If the event type is not supported
        """
        ...


@runtime_checkable
class EventHandler(Protocol):
    """Reacts to outbox events once they are committed.

    Handlers run outside of the transaction that produced the event. A
    handler that raises causes the entry to be retried, so handlers must
    swallow only the failures they have recorded themselves.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this handler reacts to."""
        ...

    async def handle(self, event_type: str, payload: dict[str, Any]) -> None:
        """Handle a single event.

        Args:
            event_type: The name of the event type
            payload: The serialized event data
        """
        ...


@runtime_checkable
class OutboxEventSource(Protocol):
    """Push-style source of "new outbox entry" signals.

    Implementations (PostgreSQL NOTIFY, polling, a message queue) invoke
    the callback with the entry id whenever a new entry is committed.
    """

    async def start(self, on_event: Callable[[UUID], Awaitable[None]]) -> None:
        """Start monitoring; should not return until stop() is called."""
        ...

    async def stop(self) -> None:
        """Stop monitoring and release held resources."""
        ...
