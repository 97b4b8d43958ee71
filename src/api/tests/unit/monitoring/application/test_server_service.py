"""Unit tests for ServerService."""

from unittest.mock import create_autospec

import pytest

from monitoring.application.observability import ServerServiceProbe
from monitoring.application.services import ServerService
from monitoring.domain.aggregates import Probe, Server
from monitoring.domain.events import ServerDeleted
from monitoring.domain.value_objects import HttpCheck, ServerId, ServerType
from monitoring.ports.repositories import IProbeRepository, IServerRepository
from shared_kernel.authorization.types import server_ref
from shared_kernel.exceptions import (
    AccessDeniedError,
    InvalidInputError,
    ResourceNotFoundError,
)


@pytest.fixture
def mock_server_repository():
    return create_autospec(IServerRepository, instance=True)


@pytest.fixture
def mock_probe_repository():
    return create_autospec(IProbeRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(ServerServiceProbe, instance=True)


@pytest.fixture
def service(
    mock_session, mock_server_repository, mock_probe_repository, mock_authz, mock_probe
):
    return ServerService(
        session=mock_session,
        server_repository=mock_server_repository,
        probe_repository=mock_probe_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


@pytest.fixture
def server() -> Server:
    return Server.create(
        name="db-1",
        server_type=ServerType.DATABASE,
        group_ids=frozenset({"g1"}),
        created_by_id="user-1",
    )


class TestCreateServer:
    @pytest.mark.asyncio
    async def test_requires_at_least_one_group(
        self, service, mock_server_repository, user_actor
    ):
        with pytest.raises(InvalidInputError) as exc_info:
            await service.create_server(
                user_actor, name="db", server_type=ServerType.DATABASE, group_ids=[]
            )

        assert "groups" in exc_info.value.errors
        mock_server_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_membership_in_each_group(
        self, service, mock_authz, mock_server_repository, user_actor
    ):
        mock_authz.require_membership.side_effect = AccessDeniedError("no")

        with pytest.raises(AccessDeniedError):
            await service.create_server(
                user_actor,
                name="db",
                server_type=ServerType.DATABASE,
                group_ids=["g1", "g2"],
            )

        mock_authz.require_membership.assert_awaited_once_with(user_actor, ["g1", "g2"])
        mock_server_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_server(
        self, service, mock_server_repository, mock_probe, user_actor
    ):
        server = await service.create_server(
            user_actor, name="db", server_type=ServerType.DATABASE, group_ids=["g1"]
        )

        assert server.group_ids == frozenset({"g1"})
        assert server.created_by_id == "user-1"
        mock_server_repository.save.assert_awaited_once_with(server)
        mock_probe.server_created.assert_called_once_with(server.id.value, "db", ["g1"])


class TestUpdateServer:
    @pytest.mark.asyncio
    async def test_only_new_groups_need_membership(
        self, service, server, mock_authz, mock_server_repository, user_actor
    ):
        mock_server_repository.get_by_id.return_value = server

        await service.update_server(user_actor, server.id, group_ids=["g1", "g3"])

        mock_authz.require_membership.assert_awaited_once_with(user_actor, ["g3"])
        assert server.group_ids == frozenset({"g1", "g3"})

    @pytest.mark.asyncio
    async def test_emptying_groups_is_rejected(
        self, service, server, mock_server_repository, user_actor
    ):
        mock_server_repository.get_by_id.return_value = server

        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_server(user_actor, server.id, group_ids=[])

        assert "groups" in exc_info.value.errors
        assert server.group_ids == frozenset({"g1"})
        mock_server_repository.save.assert_not_called()


class TestDeleteServer:
    @pytest.mark.asyncio
    async def test_deletes_probes_then_server(
        self,
        service,
        server,
        mock_authz,
        mock_server_repository,
        mock_probe_repository,
        user_actor,
    ):
        probes = [
            Probe.create(
                server_id=server.id,
                name=f"p{i}",
                check=HttpCheck(url="https://x.test"),
                group_ids=server.group_ids,
            )
            for i in range(2)
        ]
        mock_server_repository.get_by_id.return_value = server
        mock_probe_repository.list_for_server.return_value = probes

        await service.delete_server(user_actor, server.id)

        mock_authz.require_administer.assert_awaited_once_with(
            user_actor, server_ref(server.id.value)
        )
        assert mock_probe_repository.delete.await_count == 2
        mock_server_repository.delete.assert_awaited_once_with(server)
        (event,) = server.collect_events()
        assert isinstance(event, ServerDeleted)

    @pytest.mark.asyncio
    async def test_missing_server(self, service, mock_server_repository, super_admin):
        mock_server_repository.get_by_id.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await service.delete_server(super_admin, ServerId.generate())


class TestListServers:
    @pytest.mark.asyncio
    async def test_filters_by_visible_groups(
        self, service, mock_authz, mock_server_repository, user_actor
    ):
        mock_authz.visible_group_ids.return_value = frozenset({"g1"})
        mock_server_repository.list_visible.return_value = []

        await service.list_servers(user_actor)

        mock_server_repository.list_visible.assert_awaited_once_with(frozenset({"g1"}))
