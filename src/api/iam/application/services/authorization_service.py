"""Group-scoped authorization engine.

Combines the membership directory with the resource ownership graph and
the actor's global role. Every route asks this one engine, so the rules
for "who may see or change what" live in a single place.
"""

from __future__ import annotations

from enum import StrEnum

from iam.domain.value_objects import GroupId, GroupRole, UserId
from iam.ports.exceptions import LastAdminError
from iam.ports.repositories import IGroupRepository
from shared_kernel.authorization.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from shared_kernel.authorization.protocols import IResourceOwnershipGraph
from shared_kernel.authorization.types import (
    Actor,
    GlobalRole,
    ResourceRef,
    group_ref,
)
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError


class Permission(StrEnum):
    VIEW = "view"
    ADMINISTER = "administer"


class AuthorizationService:
    """Implements AuthorizationProvider over the caller's database session.

    The repository and ownership graph share the session of the service
    that guards a mutation, so checks and writes see the same snapshot.
    """

    def __init__(
        self,
        group_repository: IGroupRepository,
        ownership_graph: IResourceOwnershipGraph,
        probe: AuthorizationProbe | None = None,
    ):
        self._group_repository = group_repository
        self._ownership_graph = ownership_graph
        self._probe = probe or DefaultAuthorizationProbe()

    async def _decide(
        self, actor: Actor, resource: ResourceRef, permission: Permission
    ) -> bool | None:
        """Decide a permission, or return None when the resource does not exist."""
        attached = await self._ownership_graph.groups_of(resource)
        if attached is None:
            return None

        if actor.is_super_admin:
            granted = True
        elif not attached:
            granted = False
        else:
            memberships = await self._group_repository.memberships_of(
                UserId(value=actor.user_id)
            )
            if permission == Permission.VIEW:
                granted = any(group_id in memberships for group_id in attached)
            else:
                granted = any(
                    memberships.get(group_id) == GroupRole.ADMIN
                    for group_id in attached
                )

        self._probe.permission_checked(
            resource=str(resource),
            permission=permission.value,
            user_id=actor.user_id,
            granted=granted,
        )
        return granted

    async def _require(
        self, actor: Actor, resource: ResourceRef, permission: Permission
    ) -> None:
        granted = await self._decide(actor, resource, permission)
        if granted is None:
            self._probe.resource_not_found(str(resource), actor.user_id)
            raise ResourceNotFoundError(
                resource.resource_type.value, resource.resource_id
            )
        if not granted:
            self._probe.access_denied(str(resource), permission.value, actor.user_id)
            raise AccessDeniedError(
                f"Insufficient rights to {permission.value} {resource}"
            )

    async def can_view(self, actor: Actor, resource: ResourceRef) -> bool:
        return bool(await self._decide(actor, resource, Permission.VIEW))

    async def can_administer(self, actor: Actor, resource: ResourceRef) -> bool:
        return bool(await self._decide(actor, resource, Permission.ADMINISTER))

    async def require_view(self, actor: Actor, resource: ResourceRef) -> None:
        await self._require(actor, resource, Permission.VIEW)

    async def require_administer(self, actor: Actor, resource: ResourceRef) -> None:
        await self._require(actor, resource, Permission.ADMINISTER)

    async def require_membership(self, actor: Actor, group_ids: list[str]) -> None:
        """Ensure every group exists and the actor belongs to each of them.

        SUPER_ADMIN actors only need the groups to exist.
        """
        memberships: dict[str, GroupRole] | None = None
        for group_id in group_ids:
            resource = group_ref(group_id)
            if await self._ownership_graph.groups_of(resource) is None:
                self._probe.resource_not_found(str(resource), actor.user_id)
                raise ResourceNotFoundError("group", group_id)

            if actor.is_super_admin:
                continue

            if memberships is None:
                memberships = await self._group_repository.memberships_of(
                    UserId(value=actor.user_id)
                )
            if group_id not in memberships:
                self._probe.access_denied(str(resource), "attach", actor.user_id)
                raise AccessDeniedError(f"Not a member of group {group_id}")

    async def visible_group_ids(self, actor: Actor) -> frozenset[str] | None:
        if actor.is_super_admin:
            return None
        memberships = await self._group_repository.memberships_of(
            UserId(value=actor.user_id)
        )
        return frozenset(memberships)

    async def assert_last_admin_safe(
        self,
        group_id: str,
        user_id: str,
        intended_role: GroupRole | None,
    ) -> None:
        """Reject removing or demoting the group's sole ADMIN.

        Raises:
            ResourceNotFoundError: If the group does not exist
            LastAdminError: If the change would leave the group without an ADMIN
        """
        gid = GroupId(value=group_id)
        if not await self._group_repository.lock(gid):
            raise ResourceNotFoundError("group", group_id)

        current_role = await self._group_repository.get_member_role(
            gid, UserId(value=user_id)
        )
        if current_role != GroupRole.ADMIN or intended_role == GroupRole.ADMIN:
            return

        if await self._group_repository.count_admins(gid) <= 1:
            self._probe.last_admin_protected(
                group_id=group_id,
                user_id=user_id,
                intended_role=intended_role.value if intended_role else None,
            )
            raise LastAdminError(group_id)

    def assert_privileged_mutation_allowed(
        self, caller: Actor, target_role: GlobalRole
    ) -> None:
        if target_role == GlobalRole.SUPER_ADMIN and not caller.is_super_admin:
            self._probe.privileged_mutation_denied(caller.user_id, target_role.value)
            raise AccessDeniedError("Only a super admin may change a super admin")
