"""What the outbox worker sees of a pending row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class OutboxEntry:
    """A pending outbox row.

    ``retry_count`` counts the failed attempts so far; the worker
    dead-letters the entry once it reaches the configured maximum.
    """

    id: UUID
    aggregate_type: str
    aggregate_id: str
    event_type: str
    payload: dict[str, Any]
    retry_count: int = 0
