"""Unit tests for the Group aggregate."""

import pytest

from iam.domain.aggregates import Group
from iam.domain.events import (
    GroupCreated,
    GroupDeleted,
    MemberAdded,
    MemberRemoved,
    MemberRoleChanged,
    MemberSnapshot,
)
from iam.domain.value_objects import GroupRole, UserId


@pytest.fixture
def creator() -> UserId:
    return UserId(value="creator")


class TestGroupCreation:
    def test_creator_becomes_admin(self, creator):
        group = Group.create(name="Ops", creator_id=creator)

        assert group.get_member_role(creator) == GroupRole.ADMIN
        assert group.admin_count() == 1

    def test_records_created_and_member_added(self, creator):
        group = Group.create(name="Ops", creator_id=creator)

        events = group.collect_events()

        assert isinstance(events[0], GroupCreated)
        assert isinstance(events[1], MemberAdded)
        assert events[1].role == "ADMIN"
        assert group.collect_events() == []

    @pytest.mark.parametrize("name", ["", "   ", "x" * 256])
    def test_rejects_invalid_name(self, creator, name):
        with pytest.raises(ValueError):
            Group.create(name=name, creator_id=creator)


class TestGroupMembers:
    def test_add_member_twice_raises(self, creator):
        group = Group.create(name="Ops", creator_id=creator)
        member = UserId(value="member")
        group.add_member(member, GroupRole.MEMBER)

        with pytest.raises(ValueError, match="already a member"):
            group.add_member(member, GroupRole.ADMIN)

    def test_cannot_demote_last_admin(self, creator):
        group = Group.create(name="Ops", creator_id=creator)

        with pytest.raises(ValueError, match="last admin"):
            group.update_member_role(creator, GroupRole.MEMBER)

    def test_demotes_admin_when_another_admin_exists(self, creator):
        group = Group.create(name="Ops", creator_id=creator)
        other = UserId(value="other")
        group.add_member(other, GroupRole.ADMIN)
        group.collect_events()

        group.update_member_role(creator, GroupRole.MEMBER)

        assert group.get_member_role(creator) == GroupRole.MEMBER
        (event,) = group.collect_events()
        assert isinstance(event, MemberRoleChanged)
        assert (event.old_role, event.new_role) == ("ADMIN", "MEMBER")

    def test_same_role_is_noop(self, creator):
        group = Group.create(name="Ops", creator_id=creator)
        group.collect_events()

        group.update_member_role(creator, GroupRole.ADMIN)

        assert group.collect_events() == []

    def test_remove_unknown_member_raises(self, creator):
        group = Group.create(name="Ops", creator_id=creator)

        with pytest.raises(ValueError, match="not a member"):
            group.remove_member(UserId(value="stranger"))

    def test_remove_member_records_role_held(self, creator):
        group = Group.create(name="Ops", creator_id=creator)
        member = UserId(value="member")
        group.add_member(member, GroupRole.MEMBER)
        group.collect_events()

        group.remove_member(member)

        (event,) = group.collect_events()
        assert isinstance(event, MemberRemoved)
        assert (event.user_id, event.role) == ("member", "MEMBER")
        assert not group.has_member(member)


def test_deletion_snapshots_members(creator):
    group = Group.create(name="Ops", creator_id=creator)
    group.add_member(UserId(value="member"), GroupRole.MEMBER)
    group.collect_events()

    group.mark_for_deletion()

    (event,) = group.collect_events()
    assert isinstance(event, GroupDeleted)
    assert event.group_id == group.id.value
    assert event.members == (
        MemberSnapshot(user_id="creator", role="ADMIN"),
        MemberSnapshot(user_id="member", role="MEMBER"),
    )
