"""PostgreSQL implementation of IServerRepository."""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.domain.aggregates import Server
from monitoring.domain.value_objects import ServerId
from monitoring.infrastructure.models import ServerGroupModel, ServerModel
from monitoring.infrastructure.observability import (
    DefaultMonitoringRepositoryProbe,
    MonitoringRepositoryProbe,
)
from monitoring.infrastructure.outbox import MonitoringEventSerializer
from monitoring.ports.repositories import IServerRepository
from shared_kernel.outbox.ports import IOutboxRepository


class ServerRepository(IServerRepository):
    """Repository for Server aggregates and their group attachments.

    Never commits: the calling service owns the transaction boundary.
    """

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        probe: MonitoringRepositoryProbe | None = None,
        serializer: MonitoringEventSerializer | None = None,
    ) -> None:
        self._session = session
        self._outbox = outbox
        self._probe = probe or DefaultMonitoringRepositoryProbe()
        self._serializer = serializer or MonitoringEventSerializer()

    async def save(self, server: Server) -> None:
        model = await self._session.get(ServerModel, server.id.value)
        if model is None:
            model = ServerModel(id=server.id.value, created_by_id=server.created_by_id)
            self._session.add(model)
        model.name = server.name
        model.type = server.type
        model.description = server.description
        await self._session.flush()

        await self._session.execute(
            delete(ServerGroupModel).where(ServerGroupModel.server_id == server.id.value)
        )
        self._session.add_all(
            ServerGroupModel(server_id=server.id.value, group_id=group_id)
            for group_id in sorted(server.group_ids)
        )
        await self._session.flush()

        await self._append_events(server)
        self._probe.server_saved(server.id.value, len(server.group_ids))

    async def get_by_id(self, server_id: ServerId) -> Server | None:
        model = await self._session.get(ServerModel, server_id.value)
        if model is None:
            return None
        groups = await self._load_groups([model.id])
        return self._to_domain(model, groups.get(model.id, frozenset()))

    async def list_visible(self, group_ids: frozenset[str] | None) -> list[Server]:
        stmt = select(ServerModel).order_by(ServerModel.name, ServerModel.id)
        if group_ids is not None:
            if not group_ids:
                return []
            attached = select(ServerGroupModel.server_id).where(
                ServerGroupModel.group_id.in_(group_ids)
            )
            stmt = stmt.where(ServerModel.id.in_(attached))

        result = await self._session.execute(stmt)
        models = list(result.scalars().all())
        groups = await self._load_groups([model.id for model in models])
        return [
            self._to_domain(model, groups.get(model.id, frozenset()))
            for model in models
        ]

    async def delete(self, server: Server) -> bool:
        model = await self._session.get(ServerModel, server.id.value)
        if model is None:
            return False

        await self._session.execute(
            delete(ServerGroupModel).where(ServerGroupModel.server_id == server.id.value)
        )
        await self._session.delete(model)
        await self._session.flush()

        await self._append_events(server)
        self._probe.server_deleted(server.id.value)
        return True

    async def _load_groups(self, server_ids: list[str]) -> dict[str, frozenset[str]]:
        if not server_ids:
            return {}
        stmt = select(ServerGroupModel.server_id, ServerGroupModel.group_id).where(
            ServerGroupModel.server_id.in_(server_ids)
        )
        result = await self._session.execute(stmt)
        groups: dict[str, set[str]] = defaultdict(set)
        for server_id, group_id in result.all():
            groups[server_id].add(group_id)
        return {server_id: frozenset(ids) for server_id, ids in groups.items()}

    async def _append_events(self, server: Server) -> None:
        for event in server.collect_events():
            await self._outbox.append(
                event_type=type(event).__name__,
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type="server",
                aggregate_id=server.id.value,
            )

    @staticmethod
    def _to_domain(model: ServerModel, group_ids: frozenset[str]) -> Server:
        return Server(
            id=ServerId(value=model.id),
            name=model.name,
            type=model.type,
            description=model.description,
            group_ids=group_ids,
            created_by_id=model.created_by_id,
        )
