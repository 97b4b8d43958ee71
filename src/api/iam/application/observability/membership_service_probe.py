"""Domain probe for membership directory operations."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class MembershipServiceProbe(Protocol):
    """Domain probe for membership changes."""

    def members_added(
        self,
        group_id: str,
        created: list[str],
        already_member: list[str],
        actor_id: str,
    ) -> None:
        """Record the outcome of an add-members request."""
        ...

    def member_role_changed(
        self, group_id: str, user_id: str, new_role: str, actor_id: str
    ) -> None:
        """Record that a member's role changed."""
        ...

    def member_removed(self, group_id: str, user_id: str, actor_id: str) -> None:
        """Record that a member left or was removed from a group."""
        ...

    def with_context(self, context: ObservationContext) -> MembershipServiceProbe:
        ...


class DefaultMembershipServiceProbe(StructlogProbe):
    def members_added(
        self,
        group_id: str,
        created: list[str],
        already_member: list[str],
        actor_id: str,
    ) -> None:
        self._log.info(
            "group_members_added",
            group_id=group_id,
            created=created,
            already_member=already_member,
            actor_id=actor_id,
        )

    def member_role_changed(
        self, group_id: str, user_id: str, new_role: str, actor_id: str
    ) -> None:
        self._log.info(
            "group_member_role_changed",
            group_id=group_id,
            user_id=user_id,
            new_role=new_role,
            actor_id=actor_id,
        )

    def member_removed(self, group_id: str, user_id: str, actor_id: str) -> None:
        self._log.info(
            "group_member_removed",
            group_id=group_id,
            user_id=user_id,
            actor_id=actor_id,
        )
