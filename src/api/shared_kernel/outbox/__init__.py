"""Transactional outbox shared by every bounded context.

Domain events are written to the outbox in the same transaction as the
state change that produced them, and handled asynchronously afterwards.
"""

from shared_kernel.outbox.ports import (
    EventHandler,
    EventSerializer,
    IOutboxRepository,
    OutboxEventSource,
)
from shared_kernel.outbox.value_objects import OutboxEntry

__all__ = [
    "EventHandler",
    "EventSerializer",
    "IOutboxRepository",
    "OutboxEntry",
    "OutboxEventSource",
]
