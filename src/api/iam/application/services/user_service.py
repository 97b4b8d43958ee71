"""User application service for IAM bounded context.

Covers self-registration of identities issued by the external provider
and user administration.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.domain.aggregates import Group, User
from iam.domain.value_objects import GlobalRole, UserId
from iam.ports.exceptions import (
    DuplicateEmailError,
    SelfDeletionError,
    UserAlreadyRegisteredError,
)
from iam.ports.repositories import IGroupRepository, IUserRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError


class UserService:
    """Application service for user registration and management."""

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        group_repository: IGroupRepository,
        authz: AuthorizationProvider,
        default_group_name: str = "Main group",
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user persistence
            group_repository: Repository for groups and memberships
            authz: Authorization provider for membership guards
            default_group_name: Name of the group created for the first user
            probe: Optional domain probe for observability
        """
        self._session = session
        self._user_repository = user_repository
        self._group_repository = group_repository
        self._authz = authz
        self._default_group_name = default_group_name
        self._probe = probe or DefaultUserServiceProbe()

    async def register(self, subject: str, name: str, email: str) -> User:
        """Register the identity behind a validated token.

        The first user ever registered becomes SUPER_ADMIN and the ADMIN
        of a newly created default group.

        Raises:
            UserAlreadyRegisteredError: If the subject is already registered
            DuplicateEmailError: If the email belongs to another user
        """
        user_id = UserId.from_string(subject)

        async with self._session.begin():
            if await self._user_repository.get_by_id(user_id) is not None:
                raise UserAlreadyRegisteredError(f"User {subject} is already registered")
            await self._ensure_email_available(email)

            is_first = await self._user_repository.count() == 0
            role = GlobalRole.SUPER_ADMIN if is_first else GlobalRole.USER
            user = User.register(name=name, email=email, role=role, user_id=user_id)
            user.record_login()
            await self._user_repository.save(user)

            default_group: Group | None = None
            if is_first:
                default_group = Group.create(
                    name=self._default_group_name, creator_id=user.id
                )
                await self._group_repository.save(default_group)

        self._probe.user_registered(user.id.value, user.email, role.value)
        if default_group is not None:
            self._probe.first_user_bootstrapped(user.id.value, default_group.id.value)
        return user

    async def create_user(
        self,
        actor: Actor,
        name: str,
        email: str,
        role: GlobalRole = GlobalRole.USER,
    ) -> User:
        """Create a user on behalf of a SUPER_ADMIN."""
        self._require_super_admin(actor)

        async with self._session.begin():
            await self._ensure_email_available(email)
            user = User.register(name=name, email=email, role=role)
            await self._user_repository.save(user)

        self._probe.user_created(user.id.value, user.email, actor.user_id)
        return user

    async def list_users(self, actor: Actor) -> list[User]:
        self._require_super_admin(actor)
        async with self._session.begin():
            return await self._user_repository.list_all()

    async def get_user(self, actor: Actor, user_id: UserId) -> User:
        """Get a user; allowed for the user themself and SUPER_ADMIN."""
        async with self._session.begin():
            user = await self._load(user_id)
        self._require_self_or_super_admin(actor, user_id)
        return user

    async def update_user(
        self,
        actor: Actor,
        user_id: UserId,
        name: str | None = None,
        email: str | None = None,
        role: GlobalRole | None = None,
    ) -> User:
        """Update a user's profile and, for SUPER_ADMIN callers, their role.

        A role sent by a user about themself is ignored.

        Raises:
            ResourceNotFoundError: If the user does not exist
            AccessDeniedError: If the actor may not change this user
            DuplicateEmailError: If the new email belongs to another user
        """
        async with self._session.begin():
            user = await self._load(user_id)
            self._require_self_or_super_admin(actor, user_id)
            self._authz.assert_privileged_mutation_allowed(actor, user.role)

            if email is not None and email.strip().lower() != user.email:
                await self._ensure_email_available(email)
            user.update_profile(name=name, email=email)

            if role is not None and role != user.role:
                if actor.user_id == user_id.value:
                    self._probe.self_role_change_ignored(user_id.value, role.value)
                elif not actor.is_super_admin:
                    raise AccessDeniedError("Only a super admin may change roles")
                else:
                    user.change_role(role)

            await self._user_repository.save(user)

        self._probe.user_updated(user_id.value, actor.user_id)
        return user

    async def delete_user(self, actor: Actor, user_id: UserId) -> None:
        """Delete a user after removing their memberships.

        Raises:
            ResourceNotFoundError: If the user does not exist
            AccessDeniedError: If the actor is not a SUPER_ADMIN
            SelfDeletionError: If the actor deletes their own account
            LastAdminError: If the user is the sole ADMIN of a group
        """
        async with self._session.begin():
            user = await self._load(user_id)
            self._require_super_admin(actor)
            if actor.user_id == user_id.value:
                raise SelfDeletionError("You cannot delete your own account")

            memberships = await self._group_repository.memberships_of(user_id)
            for group_id in sorted(memberships):
                await self._authz.assert_last_admin_safe(
                    group_id, user_id.value, None
                )

            removed_from = await self._group_repository.remove_all_memberships(
                user_id
            )
            user.mark_for_deletion()
            await self._user_repository.delete(user)

        self._probe.user_deleted(user_id.value, actor.user_id, removed_from)

    async def get_actor(self, user_id: UserId) -> Actor | None:
        """Resolve an authenticated subject to an actor, or None if unregistered."""
        async with self._session.begin():
            user = await self._user_repository.get_by_id(user_id)
        if user is None:
            return None
        return Actor(user_id=user.id.value, role=user.role)

    async def _load(self, user_id: UserId) -> User:
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("user", user_id.value)
        return user

    async def _ensure_email_available(self, email: str) -> None:
        if await self._user_repository.get_by_email(email.strip().lower()) is not None:
            raise DuplicateEmailError(email)

    @staticmethod
    def _require_super_admin(actor: Actor) -> None:
        if not actor.is_super_admin:
            raise AccessDeniedError("Super admin role required")

    @staticmethod
    def _require_self_or_super_admin(actor: Actor, user_id: UserId) -> None:
        if actor.user_id != user_id.value and not actor.is_super_admin:
            raise AccessDeniedError("You may only access your own account")
