"""Probe for group lifecycle operations."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class GroupServiceProbe(Protocol):
    def group_created(self, group_id: str, name: str, creator_id: str) -> None: ...

    def group_creation_failed(self, name: str, error: str) -> None:
        """Record that group creation failed."""
        ...

    def group_updated(self, group_id: str, actor_id: str) -> None:
        """Record that a group's details changed."""
        ...

    def group_deleted(self, group_id: str, actor_id: str) -> None: ...

    def group_deletion_blocked(self, group_id: str, resource_type: str) -> None:
        """Record a deletion refused because the group still owns resources."""
        ...

    def with_context(self, context: ObservationContext) -> GroupServiceProbe: ...


class DefaultGroupServiceProbe(StructlogProbe):
    def group_created(self, group_id: str, name: str, creator_id: str) -> None:
        self._log.info(
            "group_created",
            group_id=group_id,
            name=name,
            creator_id=creator_id,
        )

    def group_creation_failed(self, name: str, error: str) -> None:
        self._log.error(
            "group_creation_failed",
            name=name,
            error=error,
        )

    def group_updated(self, group_id: str, actor_id: str) -> None:
        self._log.info(
            "group_updated",
            group_id=group_id,
            actor_id=actor_id,
        )

    def group_deleted(self, group_id: str, actor_id: str) -> None:
        self._log.info(
            "group_deleted",
            group_id=group_id,
            actor_id=actor_id,
        )

    def group_deletion_blocked(self, group_id: str, resource_type: str) -> None:
        self._log.warning(
            "group_deletion_blocked",
            group_id=group_id,
            resource_type=resource_type,
        )
