"""PostgreSQL implementation of IProbeRepository.

A probe is stored as a row in ``probes`` plus exactly one settings row
in ``http_probes`` or ``webhook_probes``. Changing a probe's type
deletes the old settings row and inserts the new one in the caller's
transaction, so readers never see both or neither.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.domain.aggregates import Probe
from monitoring.domain.value_objects import (
    HttpCheck,
    ProbeCheck,
    ProbeId,
    ProbeType,
    ServerId,
    WebhookCheck,
)
from monitoring.infrastructure.models import (
    AlertHistoryModel,
    HttpProbeModel,
    ProbeGroupModel,
    ProbeModel,
    WebhookProbeModel,
)
from monitoring.infrastructure.observability import (
    DefaultMonitoringRepositoryProbe,
    MonitoringRepositoryProbe,
)
from monitoring.infrastructure.outbox import MonitoringEventSerializer
from monitoring.ports.repositories import IProbeRepository
from shared_kernel.exceptions import InvariantViolationError
from shared_kernel.outbox.ports import IOutboxRepository


class ProbeRepository(IProbeRepository):
    """Repository for Probe aggregates.

    Never commits: the calling service owns the transaction boundary.
    Deletion is explicit and ordered since every foreign key is RESTRICT.
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

    async def save(self, probe: Probe) -> None:
        model = await self._session.get(ProbeModel, probe.id.value)
        if model is None:
            model = ProbeModel(id=probe.id.value, server_id=probe.server_id.value)
            self._session.add(model)
        elif model.type != probe.type:
            self._probe.probe_type_switched(
                probe.id.value, model.type.value, probe.type.value
            )
        model.name = probe.name
        model.type = probe.type
        model.status = probe.status
        model.last_checked_at = probe.last_checked_at
        model.last_message = probe.last_message
        await self._session.flush()

        await self._save_check(probe.id.value, probe.check)

        await self._session.execute(
            delete(ProbeGroupModel).where(ProbeGroupModel.probe_id == probe.id.value)
        )
        self._session.add_all(
            ProbeGroupModel(probe_id=probe.id.value, group_id=group_id)
            for group_id in sorted(probe.group_ids)
        )
        await self._session.flush()

        events = probe.collect_events()
        for event in events:
            await self._outbox.append(
                event_type=type(event).__name__,
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type="probe",
                aggregate_id=probe.id.value,
            )
        self._probe.probe_saved(probe.id.value, probe.type.value, len(events))

    async def _save_check(self, probe_id: str, check: ProbeCheck) -> None:
        match check:
            case HttpCheck():
                await self._session.execute(
                    delete(WebhookProbeModel).where(
                        WebhookProbeModel.probe_id == probe_id
                    )
                )
                row = await self._session.get(HttpProbeModel, probe_id)
                if row is None:
                    row = HttpProbeModel(probe_id=probe_id)
                    self._session.add(row)
                row.url = check.url
                row.method = check.method
                row.headers = dict(check.headers)
                row.body = check.body
                row.expected_status = check.expected_status
                row.expected_keyword = check.expected_keyword
                row.timeout_ms = check.timeout_ms
                row.check_interval_s = check.check_interval_s
            case WebhookCheck():
                await self._session.execute(
                    delete(HttpProbeModel).where(HttpProbeModel.probe_id == probe_id)
                )
                row = await self._session.get(WebhookProbeModel, probe_id)
                if row is None:
                    row = WebhookProbeModel(probe_id=probe_id)
                    self._session.add(row)
                row.token = check.token
                row.expected_payload = check.expected_payload
        await self._session.flush()

    async def get_by_id(
        self, probe_id: ProbeId, for_update: bool = False
    ) -> Probe | None:
        stmt = select(ProbeModel).where(ProbeModel.id == probe_id.value)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return await self._hydrate(model)

    async def get_by_webhook_token(
        self, token: str, for_update: bool = False
    ) -> Probe | None:
        stmt = select(WebhookProbeModel.probe_id).where(WebhookProbeModel.token == token)
        result = await self._session.execute(stmt)
        probe_id = result.scalar_one_or_none()
        if probe_id is None:
            return None
        return await self.get_by_id(ProbeId(value=probe_id), for_update=for_update)

    async def list_for_server(self, server_id: ServerId) -> list[Probe]:
        stmt = (
            select(ProbeModel)
            .where(ProbeModel.server_id == server_id.value)
            .order_by(ProbeModel.name, ProbeModel.id)
        )
        result = await self._session.execute(stmt)
        return [await self._hydrate(model) for model in result.scalars().all()]

    async def delete(self, probe: Probe) -> bool:
        model = await self._session.get(ProbeModel, probe.id.value)
        if model is None:
            return False

        alerts = await self._session.execute(
            delete(AlertHistoryModel).where(AlertHistoryModel.probe_id == probe.id.value)
        )
        for sub_model in (HttpProbeModel, WebhookProbeModel, ProbeGroupModel):
            await self._session.execute(
                delete(sub_model).where(sub_model.probe_id == probe.id.value)
            )
        await self._session.delete(model)
        await self._session.flush()

        self._probe.probe_deleted(probe.id.value, alerts.rowcount or 0)
        return True

    async def _hydrate(self, model: ProbeModel) -> Probe:
        groups = await self._session.execute(
            select(ProbeGroupModel.group_id).where(ProbeGroupModel.probe_id == model.id)
        )
        return Probe(
            id=ProbeId(value=model.id),
            server_id=ServerId(value=model.server_id),
            name=model.name,
            check=await self._load_check(model),
            group_ids=frozenset(groups.scalars().all()),
            status=model.status,
            last_checked_at=model.last_checked_at,
            last_message=model.last_message,
        )

    async def _load_check(self, model: ProbeModel) -> ProbeCheck:
        if model.type == ProbeType.HTTP:
            http = await self._session.get(HttpProbeModel, model.id)
            if http is None:
                raise InvariantViolationError(
                    f"HTTP probe {model.id} has no http_probes row"
                )
            return HttpCheck(
                url=http.url,
                method=http.method,
                headers=dict(http.headers or {}),
                body=http.body,
                expected_status=http.expected_status,
                expected_keyword=http.expected_keyword,
                timeout_ms=http.timeout_ms,
                check_interval_s=http.check_interval_s,
            )

        webhook = await self._session.get(WebhookProbeModel, model.id)
        if webhook is None:
            raise InvariantViolationError(
                f"Webhook probe {model.id} has no webhook_probes row"
            )
        return WebhookCheck(token=webhook.token, expected_payload=webhook.expected_payload)
