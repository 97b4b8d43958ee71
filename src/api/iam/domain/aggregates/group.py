"""Group aggregate: the tenant boundary of servmon."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from iam.domain.events import (
    GroupCreated,
    GroupDeleted,
    GroupUpdated,
    MemberAdded,
    MemberRemoved,
    MemberRoleChanged,
    MemberSnapshot,
)
from iam.domain.value_objects import GroupId, GroupMember, GroupRole, UserId

if TYPE_CHECKING:
    from iam.domain.events import DomainEvent

MAX_NAME_LENGTH = 255


@dataclass
class Group:
    """A named set of users that servers, probes and notification
    configurations are attached to.

    Members hold a local role. The aggregate refuses to drop its last
    ADMIN; the authorization engine repeats that check under a row lock
    because two requests may each see a second admin.

    Every mutation queues a domain event. The repository drains them with
    collect_events() and derives the membership rows to write from them.
    """

    id: GroupId
    name: str
    description: str = ""
    members: list[GroupMember] = field(default_factory=list)
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def create(cls, name: str, creator_id: UserId, description: str = "") -> Group:
        """Start a group whose creator is its first ADMIN."""
        _check_name(name)
        group = cls(id=GroupId.generate(), name=name, description=description)
        group._record(GroupCreated, name=name, created_by=creator_id.value)
        group.add_member(creator_id, GroupRole.ADMIN)
        return group

    def add_member(self, user_id: UserId, role: GroupRole) -> None:
        if self.has_member(user_id):
            raise ValueError(f"{user_id} is already a member of group {self.id}")
        self.members.append(GroupMember(user_id=user_id, role=role))
        self._record(MemberAdded, user_id=user_id.value, role=role.value)

    def remove_member(self, user_id: UserId) -> None:
        """Drop a member.

        Raises:
            ValueError: If the user is not a member, or is the last admin
        """
        role = self._require_role(user_id)
        if role == GroupRole.ADMIN:
            self._refuse_losing_last_admin("remove")
        self.members = [m for m in self.members if m.user_id != user_id]
        self._record(MemberRemoved, user_id=user_id.value, role=role.value)

    def update_member_role(self, user_id: UserId, new_role: GroupRole) -> None:
        """Give a member another role; a no-op when the role is unchanged.

        Raises:
            ValueError: If the user is not a member, or is the last admin
                being demoted
        """
        old_role = self._require_role(user_id)
        if old_role == new_role:
            return
        if old_role == GroupRole.ADMIN:
            self._refuse_losing_last_admin("demote")
        self.members = [
            replace(m, role=new_role) if m.user_id == user_id else m
            for m in self.members
        ]
        self._record(
            MemberRoleChanged,
            user_id=user_id.value,
            old_role=old_role.value,
            new_role=new_role.value,
        )

    def update_details(
        self, name: str | None = None, description: str | None = None
    ) -> None:
        if name is not None:
            _check_name(name)
            self.name = name
        if description is not None:
            self.description = description
        self._record(GroupUpdated, name=self.name, description=self.description)

    def mark_for_deletion(self) -> None:
        """Queue GroupDeleted, keeping who was in the group for the audit trail."""
        snapshot = tuple(
            MemberSnapshot(user_id=m.user_id.value, role=m.role.value)
            for m in self.members
        )
        self._record(GroupDeleted, members=snapshot)

    def has_member(self, user_id: UserId) -> bool:
        return self.get_member_role(user_id) is not None

    def get_member_role(self, user_id: UserId) -> GroupRole | None:
        return next((m.role for m in self.members if m.user_id == user_id), None)

    def admin_count(self) -> int:
        return len([m for m in self.members if m.is_admin()])

    def collect_events(self) -> list[DomainEvent]:
        events, self._pending_events = self._pending_events, []
        return events

    def _require_role(self, user_id: UserId) -> GroupRole:
        role = self.get_member_role(user_id)
        if role is None:
            raise ValueError(f"{user_id} is not a member of group {self.id}")
        return role

    def _refuse_losing_last_admin(self, action: str) -> None:
        if self.admin_count() == 1:
            raise ValueError(
                f"Cannot {action} the last admin of group {self.id}; "
                "promote another member first"
            )

    def _record(self, event_type: type, **fields: Any) -> None:
        self._pending_events.append(
            event_type(group_id=self.id.value, occurred_at=datetime.now(UTC), **fields)
        )


def _check_name(name: str) -> None:
    if not name.strip() or len(name) > MAX_NAME_LENGTH:
        raise ValueError(
            f"Group name must be between 1 and {MAX_NAME_LENGTH} characters"
        )
