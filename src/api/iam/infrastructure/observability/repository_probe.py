"""Probes for user and group persistence."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str, email: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user row was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe: ...


class GroupRepositoryProbe(Protocol):
    """Domain probe for group repository operations.

    Covers group metadata and the membership rows written from the
    aggregate's events.
    """

    def group_saved(self, group_id: str, event_count: int) -> None:
        """Record that a group and its pending events were persisted."""
        ...

    def group_retrieved(self, group_id: str, member_count: int) -> None:
        """Record that a group was retrieved with members hydrated."""
        ...

    def group_deleted(self, group_id: str, membership_count: int) -> None:
        """Record that a group and its memberships were deleted."""
        ...

    def memberships_removed(self, user_id: str, group_ids: list[str]) -> None:
        """Record that every membership of a user was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> GroupRepositoryProbe: ...


class DefaultGroupRepositoryProbe(StructlogProbe):
    def group_saved(self, group_id: str, event_count: int) -> None:
        self._log.info(
            "group_saved",
            group_id=group_id,
            event_count=event_count,
        )

    def group_retrieved(self, group_id: str, member_count: int) -> None:
        self._log.debug(
            "group_retrieved",
            group_id=group_id,
            member_count=member_count,
        )

    def group_deleted(self, group_id: str, membership_count: int) -> None:
        self._log.info(
            "group_deleted",
            group_id=group_id,
            membership_count=membership_count,
        )

    def memberships_removed(self, user_id: str, group_ids: list[str]) -> None:
        self._log.info(
            "memberships_removed",
            user_id=user_id,
            group_ids=group_ids,
        )


class DefaultUserRepositoryProbe(StructlogProbe):
    def user_saved(self, user_id: str, email: str) -> None:
        self._log.info(
            "user_saved",
            user_id=user_id,
            email=email,
        )

    def user_deleted(self, user_id: str) -> None:
        self._log.info(
            "user_deleted",
            user_id=user_id,
        )
