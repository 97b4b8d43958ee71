"""Unit tests for ProbeService."""

from unittest.mock import create_autospec

import pytest

from monitoring.application.services import ProbeService
from monitoring.application.value_objects import WebhookSettings
from monitoring.domain.aggregates import Probe, Server
from monitoring.domain.value_objects import (
    HttpCheck,
    ProbeType,
    ServerId,
    ServerType,
)
from monitoring.ports.repositories import (
    IAlertHistoryRepository,
    IProbeRepository,
    IServerRepository,
)
from shared_kernel.authorization.types import probe_ref, server_ref
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError


@pytest.fixture
def server() -> Server:
    return Server.create(
        name="web-1",
        server_type=ServerType.APPLICATION,
        group_ids=frozenset({"g1", "g2"}),
        created_by_id="user-1",
    )


@pytest.fixture
def mock_server_repository(server):
    repo = create_autospec(IServerRepository, instance=True)
    repo.get_by_id.return_value = server
    return repo


@pytest.fixture
def mock_probe_repository():
    return create_autospec(IProbeRepository, instance=True)


@pytest.fixture
def service(mock_session, mock_server_repository, mock_probe_repository, mock_authz):
    return ProbeService(
        session=mock_session,
        server_repository=mock_server_repository,
        probe_repository=mock_probe_repository,
        alert_repository=create_autospec(IAlertHistoryRepository, instance=True),
        authz=mock_authz,
    )


class TestCreateProbe:
    @pytest.mark.asyncio
    async def test_inherits_server_groups(self, service, server, mock_authz, user_actor):
        probe = await service.create_probe(
            user_actor, server.id, "homepage", HttpCheck(url="https://x.test")
        )

        assert probe.group_ids == frozenset({"g1", "g2"})
        mock_authz.require_view.assert_awaited_once_with(
            user_actor, server_ref(server.id.value)
        )
        mock_authz.require_membership.assert_not_called()

    @pytest.mark.asyncio
    async def test_explicit_groups_require_membership(
        self, service, server, mock_authz, user_actor
    ):
        probe = await service.create_probe(
            user_actor,
            server.id,
            "homepage",
            HttpCheck(url="https://x.test"),
            group_ids=["g9"],
        )

        mock_authz.require_membership.assert_awaited_once_with(user_actor, ["g9"])
        assert probe.group_ids == frozenset({"g9"})

    @pytest.mark.asyncio
    async def test_webhook_probe_gets_token(self, service, server, user_actor):
        probe = await service.create_probe(
            user_actor, server.id, "heartbeat", WebhookSettings({"state": "up"})
        )

        assert probe.type == ProbeType.WEBHOOK
        assert probe.webhook_token

    @pytest.mark.asyncio
    async def test_missing_server(
        self, service, mock_server_repository, mock_probe_repository, super_admin
    ):
        mock_server_repository.get_by_id.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await service.create_probe(
                super_admin, ServerId.generate(), "p", HttpCheck(url="https://x.test")
            )

        mock_probe_repository.save.assert_not_called()


class TestUpdateProbe:
    @pytest.fixture
    def webhook_probe(self, server, mock_probe_repository) -> Probe:
        probe = Probe.create(
            server_id=server.id,
            name="heartbeat",
            check=HttpCheck(url="https://x.test"),
            group_ids=server.group_ids,
        )
        probe.configure_webhook()
        mock_probe_repository.get_by_id.return_value = probe
        return probe

    @pytest.mark.asyncio
    async def test_webhook_token_survives_reconfiguration(
        self, service, webhook_probe, user_actor
    ):
        token = webhook_probe.webhook_token

        updated = await service.update_probe(
            user_actor, webhook_probe.id, settings=WebhookSettings({"v": 2})
        )

        assert updated.webhook_token == token
        assert updated.check.expected_payload == {"v": 2}

    @pytest.mark.asyncio
    async def test_switch_to_http(self, service, webhook_probe, user_actor):
        updated = await service.update_probe(
            user_actor, webhook_probe.id, settings=HttpCheck(url="https://y.test")
        )

        assert updated.type == ProbeType.HTTP
        assert updated.webhook_token is None

    @pytest.mark.asyncio
    async def test_requires_administer(
        self, service, webhook_probe, mock_authz, mock_probe_repository, user_actor
    ):
        mock_authz.require_administer.side_effect = AccessDeniedError("no")

        with pytest.raises(AccessDeniedError):
            await service.update_probe(user_actor, webhook_probe.id, name="x")

        mock_authz.require_administer.assert_awaited_once_with(
            user_actor, probe_ref(webhook_probe.id.value)
        )
        mock_probe_repository.save.assert_not_called()
