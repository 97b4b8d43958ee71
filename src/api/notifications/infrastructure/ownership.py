"""Ownership resolver for notification configurations.

A configuration belongs to exactly one group.
"""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from notifications.infrastructure.models import NotificationConfigModel
from shared_kernel.authorization.types import ResourceRef, ResourceType


class NotificationConfigOwnershipResolver:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def resource_types(self) -> frozenset[ResourceType]:
        return frozenset({ResourceType.NOTIFICATION_CONFIG})

    async def groups_of(self, resource: ResourceRef) -> frozenset[str] | None:
        result = await self._session.execute(
            select(NotificationConfigModel.group_id).where(
                NotificationConfigModel.id == resource.resource_id
            )
        )
        group_id = result.scalar_one_or_none()
        return frozenset({group_id}) if group_id is not None else None

    async def has_attached(self, group_id: str, resource_type: ResourceType) -> bool:
        result = await self._session.execute(
            select(exists().where(NotificationConfigModel.group_id == group_id))
        )
        return bool(result.scalar())
