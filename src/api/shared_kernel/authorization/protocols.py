"""Authorization protocols shared across bounded contexts.

Every bounded context asks the same questions of the same engine, so the
"group admin" check cannot drift between route handlers. Implementations
are bound to the caller's database session: permission checks run inside
the same transaction as the mutation they guard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shared_kernel.authorization.types import (
        Actor,
        GlobalRole,
        GroupRole,
        ResourceRef,
        ResourceType,
    )


@runtime_checkable
class IResourceOwnershipGraph(Protocol):
    """Answers which groups a resource is attached to."""

    async def groups_of(self, resource: ResourceRef) -> frozenset[str] | None:
        """Return the ids of the groups the resource is attached to.

        A group is attached to itself. Resources may legitimately be
        attached to zero groups, which yields an empty set.

        Args:
            resource: The resource to look up

        Returns:
            The attached group ids, or None if the resource does not exist
        """
        ...

    async def has_attached(self, group_id: str, resource_type: ResourceType) -> bool:
        """Check whether any resource of the given type is attached to the group."""
        ...


@runtime_checkable
class OwnershipResolver(IResourceOwnershipGraph, Protocol):
    """Answers ownership questions for the resource types one context owns.

    Each bounded context contributes a resolver for its own tables; the
    resolvers are combined into a single ownership graph at wiring time.
    """

    def resource_types(self) -> frozenset[ResourceType]:
        """Return the resource types this resolver answers for."""
        ...


class AuthorizationProvider(Protocol):
    """Group-scoped authorization engine.

    SUPER_ADMIN actors may view and administer everything. Everyone else
    may view a resource when they are a member of any attached group, and
    administer it when they are an ADMIN of any attached group.
    """

    async def can_view(self, actor: Actor, resource: ResourceRef) -> bool:
        """Check whether the actor may view the resource."""
        ...

    async def can_administer(self, actor: Actor, resource: ResourceRef) -> bool:
        """Check whether the actor may administer the resource."""
        ...

    async def require_view(self, actor: Actor, resource: ResourceRef) -> None:
        """Ensure the actor may view the resource.

        Raises:
            ResourceNotFoundError: If the resource does not exist
            AccessDeniedError: If it exists but the actor lacks rights
        """
        ...

    async def require_administer(self, actor: Actor, resource: ResourceRef) -> None:
        """Ensure the actor may administer the resource.

        Raises:
            ResourceNotFoundError: If the resource does not exist
            AccessDeniedError: If it exists but the actor lacks rights
        """
        ...

    async def require_membership(self, actor: Actor, group_ids: list[str]) -> None:
        """Ensure every group exists and the actor belongs to each of them.

        Used when attaching a new resource to groups.

        Raises:
            ResourceNotFoundError: If one of the groups does not exist
            AccessDeniedError: If the actor is not a member of one of them
        """
        ...

    async def visible_group_ids(self, actor: Actor) -> frozenset[str] | None:
        """Return the groups whose resources the actor may list.

        Returns:
            The group ids, or None when the actor may see everything
        """
        ...

    async def assert_last_admin_safe(
        self,
        group_id: str,
        user_id: str,
        intended_role: GroupRole | None,
    ) -> None:
        """Reject a change that would leave the group without an ADMIN.

        Locks the group row before counting admins, so concurrent
        demotions of different admins serialize on the lock.

        Args:
            group_id: The group whose membership changes
            user_id: The member being changed
            intended_role: The new role, or None for removal

        Raises:
            LastAdminError: If the member is the sole ADMIN and would lose it
        """
        ...

    def assert_privileged_mutation_allowed(
        self, caller: Actor, target_role: GlobalRole
    ) -> None:
        """Reject changes to a SUPER_ADMIN made by anyone but a SUPER_ADMIN.

        Raises:
            AccessDeniedError: If the target is SUPER_ADMIN and the caller is not
        """
        ...
