"""Unit tests for NotificationConfig and Notification."""

from datetime import UTC, datetime

import pytest

from notifications.domain.aggregates import Notification, NotificationConfig
from notifications.domain.value_objects import (
    ChannelType,
    EmailChannel,
    NotificationEvent,
    NotificationLevel,
    NotificationStatus,
    WebhookChannel,
)
from shared_kernel.exceptions import InvariantViolationError


@pytest.fixture
def event() -> NotificationEvent:
    return NotificationEvent(
        level=NotificationLevel.ERROR,
        title="down",
        message="connection refused",
        server_id="s1",
        server_name="web-1",
        timestamp=datetime(2026, 10, 16, tzinfo=UTC),
    )


class TestNotificationConfig:
    def test_type_follows_channel(self):
        config = NotificationConfig.create(
            name="ops mail",
            group_id="g1",
            channel=EmailChannel(recipients=("ops@example.com",)),
        )

        assert config.type == ChannelType.EMAIL

    def test_type_switch_replaces_settings(self):
        config = NotificationConfig.create(
            name="ops",
            group_id="g1",
            channel=EmailChannel(recipients=("ops@example.com",)),
        )

        config.update(channel=WebhookChannel(url="https://hooks.test/x"))
        assert config.type == ChannelType.WEBHOOK
        assert not isinstance(config.channel, EmailChannel)

        config.update(channel=EmailChannel(recipients=("oncall@example.com",)))
        assert config.type == ChannelType.EMAIL
        assert config.channel.recipients == ("oncall@example.com",)

    def test_email_channel_requires_recipients(self):
        with pytest.raises(ValueError):
            EmailChannel(recipients=())

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            NotificationConfig.create(
                name="  ", group_id="g1", channel=WebhookChannel(url="https://h.test")
            )


class TestNotification:
    def test_attempt_starts_pending(self, event):
        notification = Notification.attempt("c1", event)

        assert notification.status == NotificationStatus.PENDING
        assert notification.details["server_name"] == "web-1"

    def test_failed_keeps_reason(self, event):
        notification = Notification.attempt("c1", event)

        notification.mark_failed("SMTP connection refused")

        assert notification.status == NotificationStatus.FAILED
        assert notification.status_details == "SMTP connection refused"
        assert notification.sent_at is None

    def test_terminal_status_is_final(self, event):
        notification = Notification.attempt("c1", event)
        notification.mark_sent()

        with pytest.raises(InvariantViolationError):
            notification.mark_failed("late")
