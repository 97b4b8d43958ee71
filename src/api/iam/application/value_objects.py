"""Application-layer value objects for IAM bounded context.

These are read-only view objects returned by the application services,
distinct from the domain aggregates they are assembled from.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from iam.domain.value_objects import GroupRole


@dataclass(frozen=True)
class MembershipChanges:
    """Outcome of an add-members request.

    Attributes:
        created: Ids of users that became members
        already_member: Ids of users that were members before the request
    """

    created: list[str] = field(default_factory=list)
    already_member: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MemberDetails:
    """A group member joined with the user's profile."""

    user_id: str
    name: str
    email: str
    role: GroupRole


@dataclass(frozen=True)
class GroupMembershipView:
    """A group seen from one of its members."""

    group_id: str
    name: str
    role: GroupRole
