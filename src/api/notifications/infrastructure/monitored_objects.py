"""Read-only lookup of the servers and probes notifications refer to."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.infrastructure.models import ProbeModel, ServerModel
from notifications.ports.repositories import IMonitoredObjectLookup


class SqlMonitoredObjectLookup(IMonitoredObjectLookup):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def server_name(self, server_id: str) -> str | None:
        result = await self._session.execute(
            select(ServerModel.name).where(ServerModel.id == server_id)
        )
        return result.scalar_one_or_none()

    async def probe_name(self, probe_id: str, server_id: str) -> str | None:
        result = await self._session.execute(
            select(ProbeModel.name).where(
                ProbeModel.id == probe_id, ProbeModel.server_id == server_id
            )
        )
        return result.scalar_one_or_none()
