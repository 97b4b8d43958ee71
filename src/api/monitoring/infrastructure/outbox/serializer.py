"""Outbox payloads for monitoring events."""

from __future__ import annotations

from typing import Any, get_args

from monitoring.domain.events import DomainEvent
from shared_kernel.outbox.payloads import event_payload

_MONITORING_EVENTS = frozenset(cls.__name__ for cls in get_args(DomainEvent))


class MonitoringEventSerializer:
    def supported_event_types(self) -> frozenset[str]:
        return _MONITORING_EVENTS

    def serialize(self, event: DomainEvent) -> dict[str, Any]:
        """Flatten a server or probe event.

        ``ProbeStatusChanged`` payloads are read back by the notification
        alert handler, so their keys are part of that contract.

        Raises:
            ValueError: If the event does not belong to this context
        """
        name = type(event).__name__
        if name not in _MONITORING_EVENTS:
            raise ValueError(f"{name} is not a monitoring event")
        return event_payload(event)
