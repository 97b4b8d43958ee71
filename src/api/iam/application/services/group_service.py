"""Group application service for IAM bounded context.

Orchestrates group lifecycle: creation with the creator as first admin,
visibility-filtered listing, updates and guarded deletion.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultGroupServiceProbe, GroupServiceProbe
from iam.domain.aggregates import Group
from iam.domain.value_objects import GlobalRole, GroupId, UserId
from iam.ports.exceptions import GroupCreationForbiddenError, GroupNotEmptyError
from iam.ports.repositories import IGroupRepository
from shared_kernel.authorization.protocols import (
    AuthorizationProvider,
    IResourceOwnershipGraph,
)
from shared_kernel.authorization.types import Actor, ResourceType, group_ref
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError

# Checked in this order when deleting a group.
_DEPENDENT_RESOURCE_TYPES = (
    ResourceType.SERVER,
    ResourceType.PROBE,
    ResourceType.NOTIFICATION_CONFIG,
)


class GroupService:
    """Application service for group management.

    Manages database transactions; authorization checks run inside the
    same transaction as the write they guard.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        authz: AuthorizationProvider,
        ownership_graph: IResourceOwnershipGraph,
        probe: GroupServiceProbe | None = None,
    ):
        """Initialize GroupService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            authz: Authorization provider for permission checks
            ownership_graph: Used to find resources still attached on deletion
            probe: Optional domain probe for observability
        """
        self._session = session
        self._group_repository = group_repository
        self._authz = authz
        self._ownership_graph = ownership_graph
        self._probe = probe or DefaultGroupServiceProbe()

    async def create_group(
        self, actor: Actor, name: str, description: str = ""
    ) -> Group:
        """Create a new group with the actor as its first ADMIN.

        Raises:
            GroupCreationForbiddenError: If the actor's global role is USER
            ValueError: If the name is invalid
        """
        if actor.role not in (GlobalRole.SUPER_ADMIN, GlobalRole.ADMIN):
            raise GroupCreationForbiddenError(
                "Only administrators may create groups"
            )

        try:
            group = Group.create(
                name=name,
                creator_id=UserId(value=actor.user_id),
                description=description,
            )
            async with self._session.begin():
                await self._group_repository.save(group)
        except Exception as e:
            self._probe.group_creation_failed(name=name, error=str(e))
            raise

        self._probe.group_created(
            group_id=group.id.value, name=name, creator_id=actor.user_id
        )
        return group

    async def list_groups(self, actor: Actor) -> list[Group]:
        """List the groups the actor can view, ordered by name."""
        async with self._session.begin():
            visible = await self._authz.visible_group_ids(actor)
            if visible is None:
                return await self._group_repository.list_all()
            return await self._group_repository.list_by_ids(visible)

    async def get_group(self, actor: Actor, group_id: GroupId) -> Group:
        """Get a group the actor can view.

        Raises:
            ResourceNotFoundError: If the group does not exist
            AccessDeniedError: If the actor is not a member
        """
        async with self._session.begin():
            await self._authz.require_view(actor, group_ref(group_id.value))
            group = await self._group_repository.get_by_id(group_id)

        if group is None:
            raise ResourceNotFoundError("group", group_id.value)
        return group

    async def update_group(
        self,
        actor: Actor,
        group_id: GroupId,
        name: str | None = None,
        description: str | None = None,
    ) -> Group:
        async with self._session.begin():
            await self._authz.require_administer(actor, group_ref(group_id.value))

            group = await self._group_repository.get_by_id(group_id)
            if group is None:
                raise ResourceNotFoundError("group", group_id.value)
            group.update_details(name=name, description=description)
            await self._group_repository.save(group)

        self._probe.group_updated(group_id=group_id.value, actor_id=actor.user_id)
        return group

    async def delete_group(self, actor: Actor, group_id: GroupId) -> None:
        """Delete a group that no longer owns any resource.

        Raises:
            ResourceNotFoundError: If the group does not exist
            AccessDeniedError: If the actor is not a SUPER_ADMIN
            GroupNotEmptyError: If servers, probes or notification
                configurations are still attached
        """
        async with self._session.begin():
            group = await self._group_repository.get_by_id(group_id)
            if group is None:
                raise ResourceNotFoundError("group", group_id.value)

            if not actor.is_super_admin:
                raise AccessDeniedError("Only a super admin may delete groups")

            for resource_type in _DEPENDENT_RESOURCE_TYPES:
                if await self._ownership_graph.has_attached(
                    group_id.value, resource_type
                ):
                    self._probe.group_deletion_blocked(
                        group_id.value, resource_type.value
                    )
                    raise GroupNotEmptyError(group_id.value, resource_type.value)

            group.mark_for_deletion()
            await self._group_repository.delete(group)

        self._probe.group_deleted(group_id=group_id.value, actor_id=actor.user_id)
