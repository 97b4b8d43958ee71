"""Domain events for IAM context.

Events are recorded by aggregates and appended to the outbox in the same
transaction as the change. Membership events also drive persistence of
membership rows in the group repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MemberSnapshot:
    """Immutable snapshot of a member at a point in time."""

    user_id: str
    role: str


@dataclass(frozen=True)
class GroupCreated:
    group_id: str
    name: str
    created_by: str
    occurred_at: datetime


@dataclass(frozen=True)
class GroupUpdated:
    group_id: str
    name: str
    description: str
    occurred_at: datetime


@dataclass(frozen=True)
class GroupDeleted:
    """Raised when a group is deleted.

    Carries a snapshot of the members at deletion time for audit.
    """

    group_id: str
    members: tuple[MemberSnapshot, ...]
    occurred_at: datetime


@dataclass(frozen=True)
class MemberAdded:
    group_id: str
    user_id: str
    role: str
    occurred_at: datetime


@dataclass(frozen=True)
class MemberRemoved:
    group_id: str
    user_id: str
    role: str
    occurred_at: datetime


@dataclass(frozen=True)
class MemberRoleChanged:
    group_id: str
    user_id: str
    old_role: str
    new_role: str
    occurred_at: datetime


@dataclass(frozen=True)
class UserRegistered:
    user_id: str
    email: str
    role: str
    occurred_at: datetime


@dataclass(frozen=True)
class UserRoleChanged:
    user_id: str
    old_role: str
    new_role: str
    occurred_at: datetime


@dataclass(frozen=True)
class UserDeleted:
    user_id: str
    occurred_at: datetime


DomainEvent = (
    GroupCreated
    | GroupUpdated
    | GroupDeleted
    | MemberAdded
    | MemberRemoved
    | MemberRoleChanged
    | UserRegistered
    | UserRoleChanged
    | UserDeleted
)
