"""PostgreSQL NOTIFY event source for the outbox.

A trigger on the outbox table issues ``pg_notify('outbox_events', id)``
for every inserted row. This source listens on that channel through
asyncpg-listen, which reconnects on its own after connection loss.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from uuid import UUID

from asyncpg_listen import (
    ListenPolicy,
    NotificationListener,
    NotificationOrTimeout,
    Timeout,
    connect_func,
)

from shared_kernel.outbox.observability import (
    DefaultEventSourceProbe,
    EventSourceProbe,
)

OUTBOX_CHANNEL = "outbox_events"


class PostgresNotifyEventSource:
    """Implements the OutboxEventSource protocol on top of LISTEN/NOTIFY.

    Missed notifications (listener down, malformed payload) are not lost:
    the worker's poll loop picks the entries up later.
    """

    def __init__(
        self,
        db_url: str,
        channel: str = OUTBOX_CHANNEL,
        probe: EventSourceProbe | None = None,
    ) -> None:
        """Initialize the NOTIFY event source.

        Args:
            db_url: libpq-style PostgreSQL URL (no SQLAlchemy driver suffix)
            channel: NOTIFY channel name
            probe: Optional observability probe
        """
        self._db_url = db_url
        self._channel = channel
        self._probe = probe or DefaultEventSourceProbe()
        self._running = False
        self._listener_task: asyncio.Task[None] | None = None

    async def start(self, on_event: Callable[[UUID], Awaitable[None]]) -> None:
        """Listen until stop() is called, invoking on_event per entry id."""
        self._running = True

        async def handle_notification(notification: NotificationOrTimeout) -> None:
            if not self._running or isinstance(notification, Timeout):
                return
            if not notification.payload:
                return

            try:
                entry_id = UUID(notification.payload)
            except ValueError:
                self._probe.malformed_wakeup(
                    notification.payload, "Invalid UUID format"
                )
                return

            self._probe.wakeup_received(entry_id)
            await on_event(entry_id)

        listener = NotificationListener(connect_func(self._db_url))
        self._probe.listening_started(self._channel)
        self._listener_task = asyncio.create_task(
            listener.run(
                {self._channel: handle_notification},
                policy=ListenPolicy.ALL,
            )
        )

        try:
            await self._listener_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            # the poll loop keeps running without the listener
            self._probe.listener_failed(str(e))

    async def stop(self) -> None:
        """Stop listening."""
        self._running = False

        if self._listener_task is not None and not self._listener_task.done():
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass

        self._probe.listening_stopped()
