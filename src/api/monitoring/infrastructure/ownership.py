"""Ownership resolvers for servers and probes."""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.infrastructure.models import (
    ProbeGroupModel,
    ProbeModel,
    ServerGroupModel,
    ServerModel,
)
from shared_kernel.authorization.types import ResourceRef, ResourceType


class _AssociationResolver:
    """Resolves ownership through an ``<entity>_groups`` association table."""

    resource_type: ResourceType

    def __init__(self, session: AsyncSession, entity, association, key) -> None:
        self._session = session
        self._entity = entity
        self._association = association
        self._key = key

    def resource_types(self) -> frozenset[ResourceType]:
        return frozenset({self.resource_type})

    async def groups_of(self, resource: ResourceRef) -> frozenset[str] | None:
        found = await self._session.execute(
            select(self._entity.id).where(self._entity.id == resource.resource_id)
        )
        if found.scalar_one_or_none() is None:
            return None

        result = await self._session.execute(
            select(self._association.group_id).where(
                self._key == resource.resource_id
            )
        )
        return frozenset(result.scalars().all())

    async def has_attached(self, group_id: str, resource_type: ResourceType) -> bool:
        stmt = select(
            exists().where(self._association.group_id == group_id)
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())


class ServerOwnershipResolver(_AssociationResolver):
    resource_type = ResourceType.SERVER

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session, ServerModel, ServerGroupModel, ServerGroupModel.server_id
        )


class ProbeOwnershipResolver(_AssociationResolver):
    resource_type = ResourceType.PROBE

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProbeModel, ProbeGroupModel, ProbeGroupModel.probe_id)
