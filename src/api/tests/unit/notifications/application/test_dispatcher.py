"""Unit tests for NotificationDispatcher.

Channel adapters and the store are mocked. Every call must record
exactly one notification and report failures without raising.
"""

import asyncio
from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from notifications.application.observability import DispatchProbe
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.domain.aggregates import NotificationConfig
from notifications.domain.rendering import RenderedEmail
from notifications.domain.value_objects import (
    EmailChannel,
    NotificationEvent,
    NotificationLevel,
    NotificationStatus,
    WebhookChannel,
)
from notifications.ports.channels import EmailSender, WebhookSender
from notifications.ports.exceptions import ChannelDeliveryError
from notifications.ports.repositories import INotificationStore
from shared_kernel.exceptions import InvariantViolationError, ResourceNotFoundError


@pytest.fixture
def event() -> NotificationEvent:
    return NotificationEvent(
        level=NotificationLevel.WARNING,
        title="Probe homepage on web-1 is WARNING",
        message="Expected status 200, got 500",
        server_id="s1",
        server_name="web-1",
        probe_id="p1",
        probe_name="homepage",
        timestamp=datetime(2026, 10, 16, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def email_config() -> NotificationConfig:
    return NotificationConfig.create(
        name="ops mail",
        group_id="g1",
        channel=EmailChannel(recipients=("ops@example.com",)),
    )


@pytest.fixture
def webhook_config() -> NotificationConfig:
    return NotificationConfig.create(
        name="chat",
        group_id="g1",
        channel=WebhookChannel(
            url="https://hooks.test/x",
            headers={"X-Token": "t"},
            payload_template={"channel": "#ops", "level": "ignored"},
        ),
    )


@pytest.fixture
def mock_store():
    return create_autospec(INotificationStore, instance=True)


@pytest.fixture
def mock_email_sender():
    return create_autospec(EmailSender, instance=True)


@pytest.fixture
def mock_webhook_sender():
    return create_autospec(WebhookSender, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(DispatchProbe, instance=True)


@pytest.fixture
def dispatcher(mock_store, mock_email_sender, mock_webhook_sender, mock_probe):
    return NotificationDispatcher(
        store=mock_store,
        email_sender=mock_email_sender,
        webhook_sender=mock_webhook_sender,
        delivery_timeout_seconds=0.05,
        timezone="UTC",
        probe=mock_probe,
    )


class TestEmailDelivery:
    @pytest.mark.asyncio
    async def test_success_records_sent(
        self, dispatcher, email_config, event, mock_store, mock_email_sender
    ):
        mock_store.load_config.return_value = email_config
        mock_email_sender.send.return_value = {"accepted": ["ops@example.com"]}

        outcome = await dispatcher.send(email_config.id.value, event)

        assert outcome.delivered is True
        assert outcome.result == {"accepted": ["ops@example.com"]}
        assert outcome.notification.status == NotificationStatus.SENT
        assert outcome.notification.sent_at is not None
        recipients, message = mock_email_sender.send.await_args.args
        assert recipients == ("ops@example.com",)
        assert isinstance(message, RenderedEmail)
        assert message.subject.startswith("[WARNING]")
        mock_store.record.assert_awaited_once_with(outcome.notification)

    @pytest.mark.asyncio
    async def test_smtp_failure_is_recorded_not_raised(
        self, dispatcher, email_config, event, mock_store, mock_email_sender, mock_probe
    ):
        mock_store.load_config.return_value = email_config
        mock_email_sender.send.side_effect = ChannelDeliveryError(
            "SMTP connection refused"
        )

        outcome = await dispatcher.send(email_config.id.value, event)

        assert outcome.delivered is False
        assert outcome.notification.status == NotificationStatus.FAILED
        assert outcome.notification.status_details == "SMTP connection refused"
        mock_store.record.assert_awaited_once_with(outcome.notification)
        mock_probe.notification_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_timeout_is_a_failure(
        self, dispatcher, email_config, event, mock_store, mock_email_sender
    ):
        release = asyncio.Event()

        async def hang(*args):
            await release.wait()

        mock_store.load_config.return_value = email_config
        mock_email_sender.send.side_effect = hang

        outcome = await dispatcher.send(email_config.id.value, event)
        release.set()

        assert outcome.notification.status == NotificationStatus.FAILED
        assert "timed out" in outcome.notification.status_details

    @pytest.mark.asyncio
    async def test_timed_out_delivery_keeps_its_channel_slot(
        self, email_config, event, mock_store, mock_email_sender, mock_webhook_sender
    ):
        dispatcher = NotificationDispatcher(
            store=mock_store,
            email_sender=mock_email_sender,
            webhook_sender=mock_webhook_sender,
            delivery_timeout_seconds=0.05,
            email_concurrency=1,
            timezone="UTC",
        )
        release = asyncio.Event()
        active = 0
        peak = 0

        async def slow(*args):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            try:
                await release.wait()
            finally:
                active -= 1

        mock_store.load_config.return_value = email_config
        mock_email_sender.send.side_effect = slow

        first = await dispatcher.send(email_config.id.value, event)
        second = asyncio.create_task(dispatcher.send(email_config.id.value, event))
        await asyncio.sleep(0.1)

        assert first.delivered is False
        assert mock_email_sender.send.await_count == 1
        assert not second.done()

        release.set()
        outcome = await second

        assert outcome.delivered is True
        assert mock_email_sender.send.await_count == 2
        assert peak == 1


class TestWebhookDelivery:
    @pytest.mark.asyncio
    async def test_payload_merges_template_with_live_fields(
        self, dispatcher, webhook_config, event, mock_store, mock_webhook_sender
    ):
        mock_store.load_config.return_value = webhook_config
        mock_webhook_sender.send.return_value = {"ok": True}

        outcome = await dispatcher.send(webhook_config.id.value, event)

        url, headers, payload = mock_webhook_sender.send.await_args.args
        assert url == "https://hooks.test/x"
        assert headers == {"X-Token": "t"}
        assert payload["channel"] == "#ops"
        assert payload["level"] == "WARNING"
        assert payload["probe_name"] == "homepage"
        assert outcome.result == {"ok": True}


class TestConfigResolution:
    @pytest.mark.asyncio
    async def test_unknown_config_raises_without_recording(
        self, dispatcher, event, mock_store
    ):
        mock_store.load_config.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await dispatcher.send("01J00000000000000000000000", event)

        mock_store.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_channel_settings_propagate(
        self, dispatcher, event, mock_store, mock_probe
    ):
        mock_store.load_config.side_effect = InvariantViolationError("no sub-row")

        with pytest.raises(InvariantViolationError):
            await dispatcher.send("c1", event)

        mock_probe.config_invariant_violated.assert_called_once_with("c1", "no sub-row")


class TestTestNotification:
    @pytest.mark.asyncio
    async def test_sends_info_test_event(
        self, dispatcher, webhook_config, mock_store, mock_webhook_sender
    ):
        mock_store.load_config.return_value = webhook_config
        mock_webhook_sender.send.return_value = None

        outcome = await dispatcher.test(webhook_config.id.value, "s1", "web-1")

        payload = mock_webhook_sender.send.await_args.args[2]
        assert payload["level"] == "INFO"
        assert payload["title"] == "Test notification"
        assert payload["details"] == {"test": True}
        assert outcome.notification.level == NotificationLevel.INFO
