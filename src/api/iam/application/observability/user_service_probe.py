"""Probe for registration and user administration."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_registered(self, user_id: str, email: str, role: str) -> None:
        """Record that an identity registered as a user."""
        ...

    def first_user_bootstrapped(self, user_id: str, group_id: str) -> None:
        """Record that the first user was promoted and given the default group."""
        ...

    def user_created(self, user_id: str, email: str, actor_id: str) -> None:
        """Record that an administrator created a user."""
        ...

    def user_updated(self, user_id: str, actor_id: str) -> None:
        """Record that a user's profile or role changed."""
        ...

    def self_role_change_ignored(self, user_id: str, requested_role: str) -> None:
        """Record that a user tried to change their own global role."""
        ...

    def user_deleted(
        self, user_id: str, actor_id: str, removed_from_groups: list[str]
    ) -> None:
        """Record that a user was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe: ...


class DefaultUserServiceProbe(StructlogProbe):
    def user_registered(self, user_id: str, email: str, role: str) -> None:
        self._log.info(
            "user_registered",
            user_id=user_id,
            email=email,
            role=role,
        )

    def first_user_bootstrapped(self, user_id: str, group_id: str) -> None:
        self._log.info(
            "first_user_bootstrapped",
            user_id=user_id,
            group_id=group_id,
        )

    def user_created(self, user_id: str, email: str, actor_id: str) -> None:
        self._log.info(
            "user_created",
            user_id=user_id,
            email=email,
            actor_id=actor_id,
        )

    def user_updated(self, user_id: str, actor_id: str) -> None:
        self._log.info(
            "user_updated",
            user_id=user_id,
            actor_id=actor_id,
        )

    def self_role_change_ignored(self, user_id: str, requested_role: str) -> None:
        self._log.warning(
            "self_role_change_ignored",
            user_id=user_id,
            requested_role=requested_role,
        )

    def user_deleted(
        self, user_id: str, actor_id: str, removed_from_groups: list[str]
    ) -> None:
        self._log.info(
            "user_deleted",
            user_id=user_id,
            actor_id=actor_id,
            removed_from_groups=removed_from_groups,
        )
