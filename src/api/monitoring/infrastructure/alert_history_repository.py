"""PostgreSQL implementation of IAlertHistoryRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.domain.alert_history import AlertHistoryEntry
from monitoring.domain.value_objects import ProbeId
from monitoring.infrastructure.models import AlertHistoryModel, ProbeGroupModel
from monitoring.ports.repositories import IAlertHistoryRepository


class AlertHistoryRepository(IAlertHistoryRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, entry: AlertHistoryEntry) -> None:
        self._session.add(
            AlertHistoryModel(
                id=entry.id,
                probe_id=entry.probe_id,
                status=entry.status,
                message=entry.message,
                created_at=entry.created_at,
                resolved=entry.resolved,
                resolved_at=entry.resolved_at,
            )
        )
        await self._session.flush()

    async def update(self, entry: AlertHistoryEntry) -> None:
        model = await self._session.get(AlertHistoryModel, entry.id)
        if model is None:
            await self.add(entry)
            return
        model.resolved = entry.resolved
        model.resolved_at = entry.resolved_at
        await self._session.flush()

    async def get_open(self, probe_id: ProbeId) -> AlertHistoryEntry | None:
        stmt = select(AlertHistoryModel).where(
            AlertHistoryModel.probe_id == probe_id.value,
            AlertHistoryModel.resolved.is_(False),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def list_for_probe(
        self, probe_id: ProbeId, limit: int | None = None
    ) -> list[AlertHistoryEntry]:
        stmt = (
            select(AlertHistoryModel)
            .where(AlertHistoryModel.probe_id == probe_id.value)
            .order_by(AlertHistoryModel.created_at.desc(), AlertHistoryModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_visible(
        self, group_ids: frozenset[str] | None, limit: int | None = None
    ) -> list[AlertHistoryEntry]:
        stmt = select(AlertHistoryModel).order_by(
            AlertHistoryModel.created_at.desc(), AlertHistoryModel.id.desc()
        )
        if group_ids is not None:
            if not group_ids:
                return []
            attached = select(ProbeGroupModel.probe_id).where(
                ProbeGroupModel.group_id.in_(group_ids)
            )
            stmt = stmt.where(AlertHistoryModel.probe_id.in_(attached))

        result = await self._session.execute(stmt.limit(limit))
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: AlertHistoryModel) -> AlertHistoryEntry:
        return AlertHistoryEntry(
            id=model.id,
            probe_id=model.probe_id,
            status=model.status,
            message=model.message,
            created_at=model.created_at,
            resolved=model.resolved,
            resolved_at=model.resolved_at,
        )
