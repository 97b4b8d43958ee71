"""Unit tests for NotificationService and NotificationConfigService."""

from unittest.mock import create_autospec

import pytest

from notifications.application.services import (
    NotificationConfigService,
    NotificationDispatcher,
    NotificationService,
)
from notifications.domain.aggregates import NotificationConfig
from notifications.domain.value_objects import (
    ChannelType,
    EmailChannel,
    NotificationConfigId,
    NotificationLevel,
    WebhookChannel,
)
from notifications.ports.repositories import (
    IMonitoredObjectLookup,
    INotificationConfigRepository,
    INotificationRepository,
)
from shared_kernel.authorization.types import notification_config_ref, server_ref
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError


@pytest.fixture
def config_id() -> NotificationConfigId:
    return NotificationConfigId.generate()


class TestNotificationService:
    @pytest.fixture
    def mock_lookup(self):
        lookup = create_autospec(IMonitoredObjectLookup, instance=True)
        lookup.server_name.return_value = "web-1"
        return lookup

    @pytest.fixture
    def mock_dispatcher(self):
        return create_autospec(NotificationDispatcher, instance=True)

    @pytest.fixture
    def mock_notification_repository(self):
        return create_autospec(INotificationRepository, instance=True)

    @pytest.fixture
    def service(
        self,
        mock_session,
        mock_notification_repository,
        mock_lookup,
        mock_authz,
        mock_dispatcher,
    ):
        return NotificationService(
            session=mock_session,
            notification_repository=mock_notification_repository,
            monitored_objects=mock_lookup,
            authz=mock_authz,
            dispatcher=mock_dispatcher,
        )

    @pytest.mark.asyncio
    async def test_send_checks_config_and_server(
        self, service, config_id, mock_authz, mock_dispatcher, user_actor
    ):
        await service.send(
            user_actor,
            config_id,
            server_id="s1",
            level=NotificationLevel.INFO,
            title="hello",
            message="world",
        )

        mock_authz.require_view.assert_any_await(
            user_actor, notification_config_ref(config_id.value)
        )
        mock_authz.require_view.assert_any_await(user_actor, server_ref("s1"))
        sent_config, event = mock_dispatcher.send.await_args.args
        assert sent_config == config_id.value
        assert event.server_name == "web-1"
        assert event.probe_name is None

    @pytest.mark.asyncio
    async def test_probe_must_belong_to_server(
        self, service, config_id, mock_lookup, mock_dispatcher, user_actor
    ):
        mock_lookup.probe_name.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await service.send(
                user_actor,
                config_id,
                server_id="s1",
                level=NotificationLevel.ERROR,
                title="t",
                message="m",
                probe_id="p-other",
            )

        mock_lookup.probe_name.assert_awaited_once_with("p-other", "s1")
        mock_dispatcher.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_denied_without_config_access(
        self, service, config_id, mock_authz, mock_dispatcher, user_actor
    ):
        mock_authz.require_view.side_effect = AccessDeniedError("no")

        with pytest.raises(AccessDeniedError):
            await service.send(
                user_actor,
                config_id,
                server_id="s1",
                level=NotificationLevel.INFO,
                title="t",
                message="m",
            )

        mock_dispatcher.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_test_uses_server_name(
        self, service, config_id, mock_dispatcher, user_actor
    ):
        await service.test(user_actor, config_id, "s1")

        mock_dispatcher.test.assert_awaited_once_with(config_id.value, "s1", "web-1")

    @pytest.mark.asyncio
    async def test_history_filtered_by_visible_groups(
        self, service, mock_authz, mock_notification_repository, user_actor
    ):
        mock_authz.visible_group_ids.return_value = frozenset({"g1"})
        mock_notification_repository.list_visible.return_value = []

        await service.list_history(user_actor, limit=10)

        mock_notification_repository.list_visible.assert_awaited_once_with(
            frozenset({"g1"}), 10
        )


class TestNotificationConfigService:
    @pytest.fixture
    def mock_config_repository(self):
        return create_autospec(INotificationConfigRepository, instance=True)

    @pytest.fixture
    def service(self, mock_session, mock_config_repository, mock_authz):
        return NotificationConfigService(
            session=mock_session,
            config_repository=mock_config_repository,
            authz=mock_authz,
        )

    @pytest.fixture
    def email_config(self, mock_config_repository) -> NotificationConfig:
        config = NotificationConfig.create(
            name="ops",
            group_id="g1",
            channel=EmailChannel(recipients=("ops@example.com",)),
        )
        mock_config_repository.get_by_id.return_value = config
        return config

    @pytest.mark.asyncio
    async def test_create_requires_membership(
        self, service, mock_authz, mock_config_repository, user_actor
    ):
        mock_authz.require_membership.side_effect = AccessDeniedError("no")

        with pytest.raises(AccessDeniedError):
            await service.create_config(
                user_actor,
                name="ops",
                group_id="g1",
                channel=WebhookChannel(url="https://h.test"),
            )

        mock_authz.require_membership.assert_awaited_once_with(user_actor, ["g1"])
        mock_config_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_switches_type(
        self, service, email_config, mock_config_repository, mock_authz, user_actor
    ):
        updated = await service.update_config(
            user_actor,
            email_config.id,
            name="ops",
            group_id="g1",
            channel=WebhookChannel(url="https://h.test"),
        )

        assert updated.type == ChannelType.WEBHOOK
        mock_authz.require_administer.assert_awaited_once_with(
            user_actor, notification_config_ref(email_config.id.value)
        )
        mock_authz.require_membership.assert_not_called()
        mock_config_repository.save.assert_awaited_once_with(email_config)

    @pytest.mark.asyncio
    async def test_moving_group_requires_membership_in_target(
        self, service, email_config, mock_authz, user_actor
    ):
        await service.update_config(user_actor, email_config.id, group_id="g2")

        mock_authz.require_membership.assert_awaited_once_with(user_actor, ["g2"])
        assert email_config.group_id == "g2"

    @pytest.mark.asyncio
    async def test_delete_missing_config(
        self, service, mock_config_repository, super_admin
    ):
        mock_config_repository.get_by_id.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await service.delete_config(super_admin, NotificationConfigId.generate())
