"""Notification dispatch engine.

Resolves a configuration, renders the event for its channel, calls the
channel adapter under a timeout and records exactly one Notification per
call. Delivery failures become FAILED notifications; they are never
raised to the caller.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

from notifications.application.observability import DefaultDispatchProbe, DispatchProbe
from notifications.application.value_objects import DispatchOutcome
from notifications.domain.aggregates import Notification, NotificationConfig
from notifications.domain.rendering import render_email, render_webhook_payload
from notifications.domain.value_objects import (
    ChannelType,
    EmailChannel,
    NotificationConfigId,
    NotificationEvent,
    NotificationLevel,
    WebhookChannel,
)
from notifications.ports.channels import EmailSender, WebhookSender
from notifications.ports.exceptions import ChannelDeliveryError
from notifications.ports.repositories import INotificationStore
from shared_kernel.exceptions import InvariantViolationError, ResourceNotFoundError


class NotificationDispatcher:
    """Delivers notifications over EMAIL and WEBHOOK channels.

    One instance is shared by the HTTP layer and the outbox worker so
    the per-channel semaphores bound concurrency process-wide. There is
    no automatic retry: every call is a single attempt. A call that times
    out reports FAILED at once, while its delivery keeps its channel slot
    until the adapter returns.
    """

    def __init__(
        self,
        store: INotificationStore,
        email_sender: EmailSender,
        webhook_sender: WebhookSender,
        delivery_timeout_seconds: float = 15.0,
        email_concurrency: int = 4,
        webhook_concurrency: int = 16,
        timezone: str = "Europe/Paris",
        timestamp_format: str = "%d/%m/%Y %H:%M:%S",
        probe: DispatchProbe | None = None,
    ):
        self._store = store
        self._email_sender = email_sender
        self._webhook_sender = webhook_sender
        self._timeout = delivery_timeout_seconds
        self._timezone = timezone
        self._timestamp_format = timestamp_format
        self._probe = probe or DefaultDispatchProbe()
        self._semaphores = {
            ChannelType.EMAIL: asyncio.Semaphore(email_concurrency),
            ChannelType.WEBHOOK: asyncio.Semaphore(webhook_concurrency),
        }
        self._in_flight: set[asyncio.Task[Any]] = set()

    async def send(self, config_id: str, event: NotificationEvent) -> DispatchOutcome:
        """Deliver an event through a configuration's channel.

        Raises:
            ResourceNotFoundError: If the configuration does not exist
            InvariantViolationError: If its channel settings are missing
        """
        config = await self._load(config_id)
        notification = Notification.attempt(config.id.value, event)

        result: Any = None
        error: str | None = None
        delivery = await self._start_delivery(config, event)
        try:
            result = await asyncio.wait_for(
                asyncio.shield(delivery), timeout=self._timeout
            )
        except TimeoutError:
            error = f"delivery timed out after {self._timeout:g}s"
        except ChannelDeliveryError as e:
            error = str(e) or "Delivery failed"

        if error is None:
            notification.mark_sent()
        else:
            notification.mark_failed(error)
        await self._store.record(notification)

        if error is None:
            self._probe.notification_sent(
                notification.id, config.id.value, config.type.value
            )
        else:
            self._probe.notification_failed(
                notification.id, config.id.value, config.type.value, error
            )
        return DispatchOutcome(
            notification=notification,
            delivered=error is None,
            result=result,
            error=error,
        )

    async def test(
        self, config_id: str, server_id: str, server_name: str
    ) -> DispatchOutcome:
        """Send an INFO test notification on behalf of a server."""
        config = await self._load(config_id)
        event = NotificationEvent(
            level=NotificationLevel.INFO,
            title="Test notification",
            message=f'This is a test of the notification configuration "{config.name}"',
            server_id=server_id,
            server_name=server_name,
            timestamp=datetime.now(UTC),
            details={"test": True},
        )
        return await self.send(config_id, event)

    async def _load(self, config_id: str) -> NotificationConfig:
        try:
            config = await self._store.load_config(NotificationConfigId(value=config_id))
        except InvariantViolationError as e:
            self._probe.config_invariant_violated(config_id, str(e))
            raise
        if config is None:
            raise ResourceNotFoundError("notification_config", config_id)
        return config

    async def _start_delivery(
        self, config: NotificationConfig, event: NotificationEvent
    ) -> asyncio.Task[Any]:
        """Start a delivery holding a slot of its channel type.

        The slot is released when the delivery itself ends, not when the
        caller stops waiting, so a timed out SMTP session still running
        in its thread keeps counting against the channel limit.
        """
        semaphore = self._semaphores[config.type]
        await semaphore.acquire()
        delivery = asyncio.create_task(self._deliver(config, event))
        self._in_flight.add(delivery)

        def release(task: asyncio.Task[Any]) -> None:
            self._in_flight.discard(task)
            semaphore.release()
            if not task.cancelled():
                # Marks a late failure as retrieved.
                task.exception()

        delivery.add_done_callback(release)
        return delivery

    async def _deliver(self, config: NotificationConfig, event: NotificationEvent) -> Any:
        match config.channel:
            case EmailChannel(recipients=recipients):
                message = render_email(event, self._timezone, self._timestamp_format)
                return await self._email_sender.send(recipients, message)
            case WebhookChannel(url=url, headers=headers, payload_template=template):
                payload = render_webhook_payload(template, event)
                return await self._webhook_sender.send(url, headers, payload)
