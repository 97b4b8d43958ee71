"""Domain probes for outbox delivery.

The outbox carries probe status changes to the notification dispatcher.
These probes report how that hand-off goes: entries handled, retried or
dead-lettered, and the health of the NOTIFY listener that wakes the
worker up.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

import structlog

logger = structlog.get_logger()


class OutboxWorkerProbe(Protocol):
    """Probe for the outbox worker's lifecycle and per-entry outcomes."""

    def worker_started(self) -> None: ...

    def worker_stopped(self) -> None: ...

    def loop_started(self, loop: str) -> None:
        """Record that the ``poll`` or ``listen`` loop is running."""
        ...

    def poll_failed(self, error: str) -> None: ...

    def batch_processed(self, count: int) -> None: ...

    def event_handled(self, entry_id: UUID, event_type: str) -> None: ...

    def event_without_handler(self, entry_id: UUID, event_type: str) -> None:
        """Record an audit-only entry that no context consumes."""
        ...

    def event_retry_scheduled(
        self, entry_id: UUID, event_type: str, error: str, attempts: int
    ) -> None: ...

    def event_dead_lettered(
        self, entry_id: UUID, event_type: str, error: str, attempts: int
    ) -> None:
        """Record an entry that will not be retried again."""
        ...

    def handler_registered(
        self, context_name: str, event_types: frozenset[str]
    ) -> None: ...


class DefaultOutboxWorkerProbe:
    """Logs worker activity through structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="outbox_worker")

    def worker_started(self) -> None:
        self._log.info("outbox_worker_started")

    def worker_stopped(self) -> None:
        self._log.info("outbox_worker_stopped")

    def loop_started(self, loop: str) -> None:
        self._log.info("outbox_loop_started", loop=loop)

    def poll_failed(self, error: str) -> None:
        self._log.warning("outbox_poll_failed", error=error)

    def batch_processed(self, count: int) -> None:
        if count:
            self._log.info("outbox_batch_processed", count=count)

    def event_handled(self, entry_id: UUID, event_type: str) -> None:
        self._log.info(
            "outbox_event_handled", entry_id=str(entry_id), event_type=event_type
        )

    def event_without_handler(self, entry_id: UUID, event_type: str) -> None:
        self._log.debug(
            "outbox_event_without_handler",
            entry_id=str(entry_id),
            event_type=event_type,
        )

    def event_retry_scheduled(
        self, entry_id: UUID, event_type: str, error: str, attempts: int
    ) -> None:
        self._log.warning(
            "outbox_event_retry_scheduled",
            entry_id=str(entry_id),
            event_type=event_type,
            error=error,
            attempts=attempts,
        )

    def event_dead_lettered(
        self, entry_id: UUID, event_type: str, error: str, attempts: int
    ) -> None:
        self._log.error(
            "outbox_event_dead_lettered",
            entry_id=str(entry_id),
            event_type=event_type,
            error=error,
            attempts=attempts,
        )

    def handler_registered(
        self, context_name: str, event_types: frozenset[str]
    ) -> None:
        self._log.info(
            "outbox_handler_registered",
            context=context_name,
            event_types=sorted(event_types),
        )


class EventSourceProbe(Protocol):
    """Probe for the LISTEN/NOTIFY wake-up channel."""

    def listening_started(self, channel: str) -> None: ...

    def listening_stopped(self) -> None: ...

    def wakeup_received(self, entry_id: UUID) -> None: ...

    def malformed_wakeup(self, payload: str, reason: str) -> None:
        """Record a notification whose payload is not an entry id."""
        ...

    def listener_failed(self, error: str) -> None: ...


class DefaultEventSourceProbe:
    """Logs listener activity through structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="outbox_listener")

    def listening_started(self, channel: str) -> None:
        self._log.info("outbox_listening_started", channel=channel)

    def listening_stopped(self) -> None:
        self._log.info("outbox_listening_stopped")

    def wakeup_received(self, entry_id: UUID) -> None:
        self._log.debug("outbox_wakeup_received", entry_id=str(entry_id))

    def malformed_wakeup(self, payload: str, reason: str) -> None:
        self._log.warning("outbox_malformed_wakeup", payload=payload, reason=reason)

    def listener_failed(self, error: str) -> None:
        self._log.error("outbox_listener_failed", error=error)
