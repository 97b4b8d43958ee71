"""Outbox payloads for IAM events."""

from __future__ import annotations

from typing import Any, get_args

from iam.domain.events import DomainEvent
from shared_kernel.outbox.payloads import event_payload

_IAM_EVENTS: frozenset[str] = frozenset(cls.__name__ for cls in get_args(DomainEvent))


class IAMEventSerializer:
    """Turns group and user events into outbox rows.

    Nothing consumes these events yet; they form the audit trail of
    membership and account changes.
    """

    def supported_event_types(self) -> frozenset[str]:
        return _IAM_EVENTS

    def serialize(self, event: DomainEvent) -> dict[str, Any]:
        name = type(event).__name__
        if name not in _IAM_EVENTS:
            raise ValueError(f"{name} is not an IAM event")
        return event_payload(event)
