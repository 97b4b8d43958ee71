"""Unit tests for GroupService."""

from unittest.mock import create_autospec

import pytest

from iam.application.observability import GroupServiceProbe
from iam.application.services import GroupService
from iam.domain.aggregates import Group
from iam.domain.value_objects import GroupId, GroupRole, UserId
from iam.ports.exceptions import GroupCreationForbiddenError, GroupNotEmptyError
from iam.ports.repositories import IGroupRepository
from shared_kernel.authorization.protocols import IResourceOwnershipGraph
from shared_kernel.authorization.types import Actor, GlobalRole, ResourceType
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError


@pytest.fixture
def mock_group_repository():
    return create_autospec(IGroupRepository, instance=True)


@pytest.fixture
def mock_graph():
    return create_autospec(IResourceOwnershipGraph, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(GroupServiceProbe, instance=True)


@pytest.fixture
def group_service(mock_session, mock_group_repository, mock_authz, mock_graph, mock_probe):
    return GroupService(
        session=mock_session,
        group_repository=mock_group_repository,
        authz=mock_authz,
        ownership_graph=mock_graph,
        probe=mock_probe,
    )


class TestCreateGroup:
    @pytest.mark.asyncio
    async def test_admin_creates_group_as_its_admin(
        self, group_service, mock_group_repository
    ):
        actor = Actor(user_id="boss", role=GlobalRole.ADMIN)

        group = await group_service.create_group(actor, "Engineering")

        assert group.get_member_role(UserId(value="boss")) == GroupRole.ADMIN
        mock_group_repository.save.assert_awaited_once_with(group)

    @pytest.mark.asyncio
    async def test_plain_user_cannot_create(self, group_service, user_actor):
        with pytest.raises(GroupCreationForbiddenError):
            await group_service.create_group(user_actor, "Engineering")


class TestListGroups:
    @pytest.mark.asyncio
    async def test_super_admin_lists_all(
        self, group_service, mock_authz, mock_group_repository, super_admin
    ):
        mock_authz.visible_group_ids.return_value = None
        mock_group_repository.list_all.return_value = []

        await group_service.list_groups(super_admin)

        mock_group_repository.list_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_user_lists_own_groups(
        self, group_service, mock_authz, mock_group_repository, user_actor
    ):
        mock_authz.visible_group_ids.return_value = frozenset({"g1"})
        mock_group_repository.list_by_ids.return_value = []

        await group_service.list_groups(user_actor)

        mock_group_repository.list_by_ids.assert_awaited_once_with(frozenset({"g1"}))


class TestDeleteGroup:
    @pytest.fixture
    def group(self) -> Group:
        group = Group.create(name="Ops", creator_id=UserId(value="user-1"))
        group.collect_events()
        return group

    @pytest.mark.asyncio
    async def test_blocked_while_servers_attached(
        self, group_service, mock_group_repository, mock_graph, super_admin, group
    ):
        mock_group_repository.get_by_id.return_value = group
        mock_graph.has_attached.side_effect = (
            lambda group_id, resource_type: resource_type == ResourceType.SERVER
        )

        with pytest.raises(GroupNotEmptyError):
            await group_service.delete_group(super_admin, group.id)

        mock_group_repository.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_deletes_empty_group(
        self, group_service, mock_group_repository, mock_graph, super_admin, group
    ):
        mock_group_repository.get_by_id.return_value = group
        mock_graph.has_attached.return_value = False

        await group_service.delete_group(super_admin, group.id)

        mock_group_repository.delete.assert_awaited_once_with(group)

    @pytest.mark.asyncio
    async def test_only_super_admin_may_delete(
        self, group_service, mock_group_repository, user_actor, group
    ):
        mock_group_repository.get_by_id.return_value = group

        with pytest.raises(AccessDeniedError):
            await group_service.delete_group(user_actor, group.id)

    @pytest.mark.asyncio
    async def test_missing_group_is_not_found(
        self, group_service, mock_group_repository, super_admin
    ):
        mock_group_repository.get_by_id.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await group_service.delete_group(super_admin, GroupId.generate())
