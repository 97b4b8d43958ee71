"""Composite resource ownership graph.

Each bounded context owns the tables that attach its resources to
groups and contributes an OwnershipResolver for them. The composite
routes each question to the resolver for the resource type, so the
authorization engine never learns about context-specific tables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared_kernel.authorization.protocols import OwnershipResolver
    from shared_kernel.authorization.types import ResourceRef, ResourceType


class CompositeOwnershipGraph:
    """Implements IResourceOwnershipGraph by delegating per resource type."""

    def __init__(self, resolvers: list[OwnershipResolver]) -> None:
        """Register resolvers.

        Raises:
            ValueError: If two resolvers claim the same resource type
        """
        self._resolvers: dict[ResourceType, OwnershipResolver] = {}
        for resolver in resolvers:
            for resource_type in resolver.resource_types():
                if resource_type in self._resolvers:
                    raise ValueError(
                        f"Resource type {resource_type} has more than one resolver"
                    )
                self._resolvers[resource_type] = resolver

    def _resolver_for(self, resource_type: ResourceType) -> OwnershipResolver:
        resolver = self._resolvers.get(resource_type)
        if resolver is None:
            raise LookupError(f"No ownership resolver for {resource_type}")
        return resolver

    async def groups_of(self, resource: ResourceRef) -> frozenset[str] | None:
        return await self._resolver_for(resource.resource_type).groups_of(resource)

    async def has_attached(self, group_id: str, resource_type: ResourceType) -> bool:
        return await self._resolver_for(resource_type).has_attached(
            group_id, resource_type
        )
