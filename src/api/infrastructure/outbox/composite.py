"""Composite event handler for the outbox.

Each bounded context registers its own handlers and the composite routes
by event type, so the worker stays context-agnostic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shared_kernel.outbox.ports import EventHandler

if TYPE_CHECKING:
    from shared_kernel.outbox.observability import OutboxWorkerProbe


class CompositeEventHandler:
    """Fans an event out to every handler registered for its type.

    Implements the EventHandler protocol. Event types without a handler
    are valid: they are audit-only entries.
    """

    def __init__(self, probe: OutboxWorkerProbe | None = None) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._probe = probe

    def register(self, handler: EventHandler, context_name: str | None = None) -> None:
        """Register a context-specific handler.

        Args:
            handler: The handler to register
            context_name: Optional bounded context name (defaults to class name)
        """
        event_types = handler.supported_event_types()
        for event_type in event_types:
            self._handlers.setdefault(event_type, []).append(handler)

        if self._probe is not None:
            name = context_name if context_name is not None else type(handler).__name__
            self._probe.handler_registered(name, event_types)

    def supported_event_types(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def handles(self, event_type: str) -> bool:
        return event_type in self._handlers

    async def handle(self, event_type: str, payload: dict[str, Any]) -> None:
        """Run every handler registered for the event type, in order.

        An exception from any handler propagates so the worker can retry
        the entry.
        """
        for handler in self._handlers.get(event_type, []):
            await handler.handle(event_type, payload)
