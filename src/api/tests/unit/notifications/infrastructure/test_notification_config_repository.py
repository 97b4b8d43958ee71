"""Unit tests for NotificationConfigRepository.

Rows are kept in memory across calls, so the channel sub-row written for
each type can be checked after a sequence of saves.
"""

from unittest.mock import create_autospec

import pytest

from notifications.domain.aggregates import NotificationConfig
from notifications.domain.value_objects import (
    ChannelType,
    EmailChannel,
    NotificationConfigId,
    WebhookChannel,
)
from notifications.infrastructure.models import (
    EmailNotificationModel,
    NotificationConfigModel,
    WebhookNotificationModel,
)
from notifications.infrastructure.notification_config_repository import (
    NotificationConfigRepository,
)
from notifications.infrastructure.observability import NotificationsInfrastructureProbe
from shared_kernel.exceptions import InvariantViolationError

EMAIL = EmailChannel(recipients=("ops@example.com", "oncall@example.com"))
WEBHOOK = WebhookChannel(
    url="https://hooks.test/x",
    headers={"X-Token": "t"},
    payload_template={"channel": "#ops"},
)


@pytest.fixture
def mock_probe():
    return create_autospec(NotificationsInfrastructureProbe, instance=True)


@pytest.fixture
def repository(row_session, mock_probe):
    return NotificationConfigRepository(session=row_session.session, probe=mock_probe)


@pytest.fixture
def email_config() -> NotificationConfig:
    return NotificationConfig.create(name="ops mail", group_id="g1", channel=EMAIL)


class TestSave:
    @pytest.mark.asyncio
    async def test_new_email_config_writes_config_and_email_rows(
        self, repository, row_session, email_config, mock_probe
    ):
        await repository.save(email_config)

        (config_row,) = row_session.of(NotificationConfigModel)
        assert config_row.type == ChannelType.EMAIL
        assert config_row.group_id == "g1"
        (email_row,) = row_session.of(EmailNotificationModel)
        assert email_row.recipients == ["ops@example.com", "oncall@example.com"]
        assert row_session.of(WebhookNotificationModel) == []
        mock_probe.config_saved.assert_called_once_with(email_config.id.value, "EMAIL")

    @pytest.mark.asyncio
    async def test_type_switches_leave_exactly_one_sub_row(
        self, repository, row_session, email_config, mock_probe
    ):
        await repository.save(email_config)

        email_config.update(channel=WEBHOOK)
        await repository.save(email_config)

        assert row_session.of(EmailNotificationModel) == []
        (webhook_row,) = row_session.of(WebhookNotificationModel)
        assert webhook_row.url == "https://hooks.test/x"
        assert webhook_row.headers == {"X-Token": "t"}
        mock_probe.channel_switched.assert_called_once_with(
            email_config.id.value, "EMAIL", "WEBHOOK"
        )

        email_config.update(channel=EmailChannel(recipients=("new@example.com",)))
        await repository.save(email_config)

        assert row_session.of(WebhookNotificationModel) == []
        (email_row,) = row_session.of(EmailNotificationModel)
        assert email_row.recipients == ["new@example.com"]
        (config_row,) = row_session.of(NotificationConfigModel)
        assert config_row.type == ChannelType.EMAIL

    @pytest.mark.asyncio
    async def test_same_type_update_rewrites_sub_row_in_place(
        self, repository, row_session, email_config, mock_probe
    ):
        await repository.save(email_config)
        (original,) = row_session.of(EmailNotificationModel)

        email_config.update(
            name="renamed", channel=EmailChannel(recipients=("b@example.com",))
        )
        await repository.save(email_config)

        (email_row,) = row_session.of(EmailNotificationModel)
        assert email_row is original
        assert email_row.recipients == ["b@example.com"]
        mock_probe.channel_switched.assert_not_called()


class TestGetById:
    @pytest.mark.asyncio
    async def test_reads_back_the_saved_channel(self, repository, email_config):
        await repository.save(email_config)

        loaded = await repository.get_by_id(email_config.id)

        assert loaded == email_config

    @pytest.mark.asyncio
    async def test_unknown_id_returns_none(self, repository):
        assert await repository.get_by_id(NotificationConfigId.generate()) is None

    @pytest.mark.asyncio
    async def test_email_config_without_email_row_is_an_invariant_violation(
        self, repository, row_session
    ):
        row_session.session.add(
            NotificationConfigModel(
                id="01J00000000000000000000001",
                name="orphan",
                group_id="g1",
                type=ChannelType.EMAIL,
            )
        )

        with pytest.raises(InvariantViolationError, match="email_notifications"):
            await repository.get_by_id(
                NotificationConfigId(value="01J00000000000000000000001")
            )

    @pytest.mark.asyncio
    async def test_webhook_config_without_webhook_row_is_an_invariant_violation(
        self, repository, row_session
    ):
        row_session.session.add(
            NotificationConfigModel(
                id="01J00000000000000000000002",
                name="orphan",
                group_id="g1",
                type=ChannelType.WEBHOOK,
            )
        )

        with pytest.raises(InvariantViolationError, match="webhook_notifications"):
            await repository.get_by_id(
                NotificationConfigId(value="01J00000000000000000000002")
            )


class TestDelete:
    @pytest.mark.asyncio
    async def test_removes_config_and_sub_rows(
        self, repository, row_session, email_config, mock_probe
    ):
        await repository.save(email_config)

        assert await repository.delete(email_config) is True

        assert row_session.of(NotificationConfigModel) == []
        assert row_session.of(EmailNotificationModel) == []
        mock_probe.config_deleted.assert_called_once_with(email_config.id.value)

    @pytest.mark.asyncio
    async def test_missing_config_returns_false(self, repository, email_config):
        assert await repository.delete(email_config) is False
