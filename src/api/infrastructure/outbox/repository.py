"""PostgreSQL implementation of the outbox repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.outbox.models import OutboxModel


class OutboxRepository:
    """Appends pre-serialized events to the outbox table.

    The repository shares the calling service's session and never commits:
    the service owns the transaction boundary, so the event is persisted if
    and only if the state change that produced it is.

    Payloads arrive already serialized by the owning bounded context,
    which keeps this repository context-agnostic.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
    ) -> None:
        """Add an outbox row to the current transaction."""
        self._session.add(
            OutboxModel(
                aggregate_type=aggregate_type,
                aggregate_id=aggregate_id,
                event_type=event_type,
                payload=payload,
                occurred_at=occurred_at,
                processed_at=None,
            )
        )
