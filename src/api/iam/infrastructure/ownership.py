"""Ownership resolver for groups: a group is attached to itself."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.infrastructure.models import GroupModel
from shared_kernel.authorization.types import ResourceRef, ResourceType


class GroupOwnershipResolver:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def resource_types(self) -> frozenset[ResourceType]:
        return frozenset({ResourceType.GROUP})

    async def groups_of(self, resource: ResourceRef) -> frozenset[str] | None:
        stmt = select(GroupModel.id).where(GroupModel.id == resource.resource_id)
        result = await self._session.execute(stmt)
        group_id = result.scalar_one_or_none()
        return frozenset({group_id}) if group_id is not None else None

    async def has_attached(self, group_id: str, resource_type: ResourceType) -> bool:
        return False
