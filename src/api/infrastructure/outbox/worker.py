"""Background delivery of committed outbox entries.

Runs inside the API process. NOTIFY wake-ups give low latency; the poll
loop picks up whatever a lost notification or a restart left behind.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.outbox.models import OutboxModel
from shared_kernel.outbox.value_objects import OutboxEntry

if TYPE_CHECKING:
    from infrastructure.outbox.composite import CompositeEventHandler
    from shared_kernel.outbox.observability import OutboxWorkerProbe
    from shared_kernel.outbox.ports import OutboxEventSource


def _pending() -> Select[tuple[OutboxModel]]:
    # SKIP LOCKED lets several API replicas share the table.
    return (
        select(OutboxModel)
        .where(OutboxModel.processed_at.is_(None), OutboxModel.failed_at.is_(None))
        .with_for_update(skip_locked=True)
    )


class OutboxWorker:
    """Hands pending entries to the composite handler, oldest first.

    An entry whose handler raises stays pending with its retry count
    bumped. After ``max_retries`` failed attempts it is dead-lettered by
    setting ``failed_at`` and never picked up again.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        handler: CompositeEventHandler,
        probe: OutboxWorkerProbe,
        event_source: OutboxEventSource | None = None,
        poll_interval_seconds: int = 30,
        batch_size: int = 100,
        max_retries: int = 5,
    ) -> None:
        self._session_factory = session_factory
        self._handler = handler
        self._probe = probe
        self._event_source = event_source
        self._poll_interval = poll_interval_seconds
        self._batch_size = batch_size
        self._max_retries = max_retries
        self._running = False
        self._tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        self._running = True
        self._probe.worker_started()
        self._tasks.append(asyncio.create_task(self._poll_loop()))
        if self._event_source is not None:
            self._probe.loop_started("listen")
            listen = self._event_source.start(self._process_single)
            self._tasks.append(asyncio.create_task(listen))

    async def stop(self) -> None:
        """Stop both loops and wait for them to exit."""
        self._running = False
        if self._event_source is not None:
            await self._event_source.stop()
        for task in self._tasks:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()
        self._probe.worker_stopped()

    async def _poll_loop(self) -> None:
        self._probe.loop_started("poll")
        while self._running:
            try:
                count = await self._claim_and_process(
                    _pending().order_by(OutboxModel.created_at).limit(self._batch_size)
                )
                self._probe.batch_processed(count)
            except Exception as e:
                self._probe.poll_failed(str(e))
            await asyncio.sleep(self._poll_interval)

    async def _process_single(self, entry_id: UUID) -> None:
        if self._running:
            await self._claim_and_process(_pending().where(OutboxModel.id == entry_id))

    async def _claim_and_process(self, statement: Select[tuple[OutboxModel]]) -> int:
        async with self._session_factory() as session:
            rows = (await session.execute(statement)).scalars().all()
            if not rows:
                return 0
            await self._process_entries([row.to_entry() for row in rows], session)
            await session.commit()
            return len(rows)

    async def _process_entries(
        self, entries: list[OutboxEntry], session: AsyncSession
    ) -> None:
        for entry in entries:
            if not self._handler.handles(entry.event_type):
                self._probe.event_without_handler(entry.id, entry.event_type)
                await self._set(session, entry.id, processed_at=datetime.now(UTC))
                continue

            try:
                await self._handler.handle(entry.event_type, entry.payload)
            except Exception as e:
                await self._record_failure(session, entry, str(e))
            else:
                await self._set(session, entry.id, processed_at=datetime.now(UTC))
                self._probe.event_handled(entry.id, entry.event_type)

    async def _record_failure(
        self, session: AsyncSession, entry: OutboxEntry, error: str
    ) -> None:
        attempts = entry.retry_count + 1
        if attempts >= self._max_retries:
            self._probe.event_dead_lettered(entry.id, entry.event_type, error, attempts)
            await self._set(
                session,
                entry.id,
                retry_count=attempts,
                last_error=error,
                failed_at=datetime.now(UTC),
            )
        else:
            self._probe.event_retry_scheduled(
                entry.id, entry.event_type, error, attempts
            )
            await self._set(session, entry.id, retry_count=attempts, last_error=error)

    @staticmethod
    async def _set(session: AsyncSession, entry_id: UUID, **values: Any) -> None:
        await session.execute(
            update(OutboxModel).where(OutboxModel.id == entry_id).values(**values)
        )
