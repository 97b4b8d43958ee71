"""Unit tests for GroupRepository.

Membership rows are derived from the aggregate's events on save; the
session keeps rows in memory so the resulting table state can be read
back.
"""

from unittest.mock import MagicMock, create_autospec

import pytest
from sqlalchemy import Update

from iam.domain.aggregates import Group
from iam.domain.value_objects import GroupRole, UserId
from iam.infrastructure.group_repository import GroupRepository
from iam.infrastructure.models import GroupMembershipModel, GroupModel
from iam.infrastructure.observability import GroupRepositoryProbe
from shared_kernel.outbox.ports import IOutboxRepository

CREATOR = UserId(value="creator")
MEMBER = UserId(value="member")


@pytest.fixture
def mock_outbox():
    return create_autospec(IOutboxRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(GroupRepositoryProbe, instance=True)


@pytest.fixture
def repository(row_session, mock_outbox, mock_probe):
    return GroupRepository(
        session=row_session.session, outbox=mock_outbox, probe=mock_probe
    )


@pytest.fixture
def group() -> Group:
    return Group.create(name="Ops", creator_id=CREATOR)


def _memberships(row_session) -> dict[str, GroupRole]:
    return {row.user_id: row.role for row in row_session.of(GroupMembershipModel)}


def _appended(mock_outbox) -> list[str]:
    return [call.kwargs["event_type"] for call in mock_outbox.append.await_args_list]


class TestSave:
    @pytest.mark.asyncio
    async def test_new_group_writes_row_and_creator_membership(
        self, repository, row_session, group, mock_outbox, mock_probe
    ):
        await repository.save(group)

        (group_row,) = row_session.of(GroupModel)
        assert group_row.name == "Ops"
        assert _memberships(row_session) == {"creator": GroupRole.ADMIN}
        assert _appended(mock_outbox) == ["GroupCreated", "MemberAdded"]
        assert mock_outbox.append.await_args.kwargs["aggregate_type"] == "group"
        assert mock_outbox.append.await_args.kwargs["aggregate_id"] == group.id.value
        mock_probe.group_saved.assert_called_once_with(group.id.value, 2)

    @pytest.mark.asyncio
    async def test_removed_member_row_is_deleted(
        self, repository, row_session, group, mock_outbox
    ):
        group.add_member(MEMBER, GroupRole.MEMBER)
        await repository.save(group)
        mock_outbox.append.reset_mock()

        group.remove_member(MEMBER)
        await repository.save(group)

        assert _memberships(row_session) == {"creator": GroupRole.ADMIN}
        assert _appended(mock_outbox) == ["MemberRemoved"]

    @pytest.mark.asyncio
    async def test_events_apply_in_order_within_one_save(
        self, repository, row_session, group
    ):
        group.add_member(MEMBER, GroupRole.MEMBER)
        group.remove_member(MEMBER)

        await repository.save(group)

        assert _memberships(row_session) == {"creator": GroupRole.ADMIN}

    @pytest.mark.asyncio
    async def test_role_change_updates_the_membership_row(
        self, repository, row_session, group
    ):
        group.add_member(MEMBER, GroupRole.MEMBER)
        await repository.save(group)

        group.update_member_role(MEMBER, GroupRole.ADMIN)
        await repository.save(group)

        updates = [
            call.args[0]
            for call in row_session.session.execute.await_args_list
            if isinstance(call.args[0], Update)
        ]
        (statement,) = updates
        assert statement.table.name == "group_memberships"
        params = statement.compile().params
        assert params["role"] == GroupRole.ADMIN
        assert set(params.values()) >= {group.id.value, "member"}

    @pytest.mark.asyncio
    async def test_save_without_changes_appends_nothing(
        self, repository, group, mock_outbox
    ):
        await repository.save(group)
        mock_outbox.append.reset_mock()

        await repository.save(group)

        mock_outbox.append.assert_not_called()


class TestDelete:
    @pytest.mark.asyncio
    async def test_deletes_memberships_then_group(
        self, repository, row_session, group, mock_outbox, mock_probe
    ):
        group.add_member(MEMBER, GroupRole.MEMBER)
        await repository.save(group)
        mock_outbox.append.reset_mock()

        group.mark_for_deletion()
        assert await repository.delete(group) is True

        assert row_session.of(GroupModel) == []
        assert row_session.of(GroupMembershipModel) == []
        assert _appended(mock_outbox) == ["GroupDeleted"]
        mock_probe.group_deleted.assert_called_once_with(group.id.value, 2)

    @pytest.mark.asyncio
    async def test_unknown_group_returns_false(self, repository, group, mock_outbox):
        assert await repository.delete(group) is False

        mock_outbox.append.assert_not_called()


class TestRemoveAllMemberships:
    @pytest.mark.asyncio
    async def test_records_one_member_removed_per_group(
        self, mock_session, mock_outbox, mock_probe
    ):
        result = MagicMock()
        result.all.return_value = [("g2", GroupRole.MEMBER), ("g1", GroupRole.ADMIN)]
        mock_session.execute.return_value = result
        repository = GroupRepository(
            session=mock_session, outbox=mock_outbox, probe=mock_probe
        )

        removed = await repository.remove_all_memberships(MEMBER)

        assert removed == ["g1", "g2"]
        calls = mock_outbox.append.await_args_list
        assert [c.kwargs["aggregate_id"] for c in calls] == ["g1", "g2"]
        assert [c.kwargs["payload"]["role"] for c in calls] == ["ADMIN", "MEMBER"]
        mock_probe.memberships_removed.assert_called_once_with("member", ["g1", "g2"])
