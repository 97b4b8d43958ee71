"""Domain probe for authorization operations.

Reports permission decisions and the membership guards (last admin,
privileged targets) as structured log events.
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class AuthorizationProbe(Protocol):
    """Domain probe for authorization operations."""

    def permission_checked(
        self,
        resource: str,
        permission: str,
        user_id: str,
        granted: bool,
    ) -> None:
        """Record that a permission was checked."""
        ...

    def access_denied(self, resource: str, permission: str, user_id: str) -> None:
        """Record that an actor was denied access to an existing resource."""
        ...

    def resource_not_found(self, resource: str, user_id: str) -> None:
        """Record that an actor referenced a resource that does not exist."""
        ...

    def last_admin_protected(
        self, group_id: str, user_id: str, intended_role: str | None
    ) -> None:
        """Record that a change was rejected to keep the group's last admin."""
        ...

    def privileged_mutation_denied(self, caller_id: str, target_role: str) -> None:
        """Record that a non-super-admin tried to change a super admin."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe: ...


class DefaultAuthorizationProbe(StructlogProbe):
    def permission_checked(
        self,
        resource: str,
        permission: str,
        user_id: str,
        granted: bool,
    ) -> None:
        self._log.debug(
            "permission_checked",
            resource=resource,
            permission=permission,
            checked_user_id=user_id,
            granted=granted,
        )

    def access_denied(self, resource: str, permission: str, user_id: str) -> None:
        self._log.warning(
            "access_denied",
            resource=resource,
            permission=permission,
            checked_user_id=user_id,
        )

    def resource_not_found(self, resource: str, user_id: str) -> None:
        self._log.info(
            "resource_not_found",
            resource=resource,
            checked_user_id=user_id,
        )

    def last_admin_protected(
        self, group_id: str, user_id: str, intended_role: str | None
    ) -> None:
        self._log.warning(
            "last_admin_protected",
            group_id=group_id,
            member_id=user_id,
            intended_role=intended_role,
        )

    def privileged_mutation_denied(self, caller_id: str, target_role: str) -> None:
        self._log.warning(
            "privileged_mutation_denied",
            caller_id=caller_id,
            target_role=target_role,
        )
