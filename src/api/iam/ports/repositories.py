"""Repository protocols (ports) for IAM bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Group, User
from iam.domain.value_objects import GroupId, GroupRole, UserId


@runtime_checkable
class IGroupRepository(Protocol):
    """Repository for Group aggregates and their memberships.

    Membership rows are the source of truth for authorization, so this
    repository also answers the Membership Directory's lookup queries.
    """

    async def save(self, group: Group) -> None:
        """Persist group metadata and apply the aggregate's pending
        membership events, appending every event to the outbox."""
        ...

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        """Retrieve a group with its members, or None if not found."""
        ...

    async def list_all(self) -> list[Group]:
        """List every group, ordered by name."""
        ...

    async def list_by_ids(self, group_ids: frozenset[str]) -> list[Group]:
        """List the given groups, ordered by name."""
        ...

    async def delete(self, group: Group) -> bool:
        """Delete memberships, then the group itself.

        Returns:
            True if deleted, False if the group did not exist
        """
        ...

    async def lock(self, group_id: GroupId) -> bool:
        """Lock the group row until the transaction ends.

        Returns:
            True if the group exists
        """
        ...

    async def count_admins(self, group_id: GroupId) -> int:
        """Count ADMIN memberships of the group."""
        ...

    async def get_member_role(
        self, group_id: GroupId, user_id: UserId
    ) -> GroupRole | None:
        """Return the user's role in the group, or None if not a member."""
        ...

    async def memberships_of(self, user_id: UserId) -> dict[str, GroupRole]:
        """Map of group id to role for every group the user belongs to."""
        ...

    async def remove_all_memberships(self, user_id: UserId) -> list[str]:
        """Delete every membership of the user.

        Returns:
            The ids of the groups the user was removed from
        """
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregates."""

    async def save(self, user: User) -> None:
        """Insert or update a user, appending its events to the outbox."""
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def get_many(self, user_ids: list[UserId]) -> dict[str, User]:
        """Fetch several users at once, keyed by id value."""
        ...

    async def list_all(self) -> list[User]:
        """List every user, ordered by name."""
        ...

    async def count(self) -> int:
        ...

    async def delete(self, user: User) -> bool:
        ...
