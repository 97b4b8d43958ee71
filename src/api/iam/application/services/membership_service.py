"""Membership directory application service.

Adds, re-roles and removes group members. Every mutation runs the
authorization checks and the last-admin guard inside the same
transaction as the write.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultMembershipServiceProbe,
    MembershipServiceProbe,
)
from iam.application.value_objects import (
    GroupMembershipView,
    MemberDetails,
    MembershipChanges,
)
from iam.domain.value_objects import GroupId, GroupRole, UserId
from iam.ports.exceptions import MembershipNotFoundError, NoNewMembersError
from iam.ports.repositories import IGroupRepository, IUserRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor, group_ref
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError


class MembershipService:
    """Application service for group memberships."""

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        user_repository: IUserRepository,
        authz: AuthorizationProvider,
        probe: MembershipServiceProbe | None = None,
    ):
        self._session = session
        self._group_repository = group_repository
        self._user_repository = user_repository
        self._authz = authz
        self._probe = probe or DefaultMembershipServiceProbe()

    async def add_members(
        self,
        actor: Actor,
        group_id: GroupId,
        additions: list[tuple[UserId, GroupRole]],
    ) -> MembershipChanges:
        """Add users to a group.

        Users who already belong to the group are reported and left
        untouched, so repeating a request never duplicates a membership.

        Raises:
            ResourceNotFoundError: If the group or one of the users does not exist
            AccessDeniedError: If the actor cannot administer the group
            NoNewMembersError: If every user was already a member
        """
        async with self._session.begin():
            await self._authz.require_administer(actor, group_ref(group_id.value))

            users = await self._user_repository.get_many(
                [user_id for user_id, _ in additions]
            )
            for user_id, _ in additions:
                if user_id.value not in users:
                    raise ResourceNotFoundError("user", user_id.value)

            group = await self._group_repository.get_by_id(group_id)
            if group is None:
                raise ResourceNotFoundError("group", group_id.value)

            created: list[str] = []
            already_member: list[str] = []
            for user_id, role in additions:
                if group.has_member(user_id):
                    if user_id.value not in already_member:
                        already_member.append(user_id.value)
                    continue
                group.add_member(user_id, role)
                created.append(user_id.value)

            if not created:
                raise NoNewMembersError(already_member)

            await self._group_repository.save(group)

        self._probe.members_added(
            group_id=group_id.value,
            created=created,
            already_member=already_member,
            actor_id=actor.user_id,
        )
        return MembershipChanges(created=created, already_member=already_member)

    async def change_role(
        self,
        actor: Actor,
        group_id: GroupId,
        user_id: UserId,
        new_role: GroupRole,
    ) -> None:
        """Change a member's role in the group.

        Raises:
            ResourceNotFoundError: If the group or membership does not exist
            AccessDeniedError: If the actor cannot administer the group, or
                the member is a SUPER_ADMIN and the actor is not
            LastAdminError: If the member is the group's sole ADMIN
        """
        async with self._session.begin():
            await self._authz.require_administer(actor, group_ref(group_id.value))
            await self._guard_member_change(actor, group_id, user_id, new_role)

            group = await self._group_repository.get_by_id(group_id)
            if group is None:
                raise ResourceNotFoundError("group", group_id.value)
            group.update_member_role(user_id, new_role)
            await self._group_repository.save(group)

        self._probe.member_role_changed(
            group_id=group_id.value,
            user_id=user_id.value,
            new_role=new_role.value,
            actor_id=actor.user_id,
        )

    async def remove_member(
        self, actor: Actor, group_id: GroupId, user_id: UserId
    ) -> None:
        """Remove a member from the group.

        Members may always leave a group they belong to; removing someone
        else requires administer rights on the group.

        Raises:
            ResourceNotFoundError: If the group or membership does not exist
            AccessDeniedError: If the actor may not remove this member
            LastAdminError: If the member is the group's sole ADMIN
        """
        async with self._session.begin():
            resource = group_ref(group_id.value)
            if actor.user_id == user_id.value:
                await self._authz.require_view(actor, resource)
            else:
                await self._authz.require_administer(actor, resource)
            await self._guard_member_change(actor, group_id, user_id, None)

            group = await self._group_repository.get_by_id(group_id)
            if group is None:
                raise ResourceNotFoundError("group", group_id.value)
            group.remove_member(user_id)
            await self._group_repository.save(group)

        self._probe.member_removed(
            group_id=group_id.value,
            user_id=user_id.value,
            actor_id=actor.user_id,
        )

    async def _guard_member_change(
        self,
        actor: Actor,
        group_id: GroupId,
        user_id: UserId,
        intended_role: GroupRole | None,
    ) -> None:
        if await self._group_repository.get_member_role(group_id, user_id) is None:
            raise MembershipNotFoundError(group_id.value, user_id.value)

        target = await self._user_repository.get_by_id(user_id)
        if target is not None:
            self._authz.assert_privileged_mutation_allowed(actor, target.role)

        await self._authz.assert_last_admin_safe(
            group_id.value, user_id.value, intended_role
        )

    async def list_members(
        self, actor: Actor, group_id: GroupId
    ) -> list[MemberDetails]:
        """List a group's members with their profiles, ordered by name."""
        async with self._session.begin():
            await self._authz.require_view(actor, group_ref(group_id.value))

            group = await self._group_repository.get_by_id(group_id)
            if group is None:
                raise ResourceNotFoundError("group", group_id.value)

            users = await self._user_repository.get_many(
                [member.user_id for member in group.members]
            )

        details = [
            MemberDetails(
                user_id=member.user_id.value,
                name=users[member.user_id.value].name,
                email=users[member.user_id.value].email,
                role=member.role,
            )
            for member in group.members
            if member.user_id.value in users
        ]
        return sorted(details, key=lambda d: d.name.lower())

    async def list_groups_for(
        self, actor: Actor, user_id: UserId
    ) -> list[GroupMembershipView]:
        """List the groups a user belongs to.

        Raises:
            AccessDeniedError: If the actor is neither the user nor a SUPER_ADMIN
            ResourceNotFoundError: If the user does not exist
        """
        if actor.user_id != user_id.value and not actor.is_super_admin:
            raise AccessDeniedError("Only the user or a super admin may list these groups")

        async with self._session.begin():
            if await self._user_repository.get_by_id(user_id) is None:
                raise ResourceNotFoundError("user", user_id.value)

            memberships = await self._group_repository.memberships_of(user_id)
            groups = await self._group_repository.list_by_ids(
                frozenset(memberships)
            )

        return [
            GroupMembershipView(
                group_id=group.id.value,
                name=group.name,
                role=memberships[group.id.value],
            )
            for group in groups
        ]
