"""Probe definition and alert history application service."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.application.observability import (
    DefaultServerServiceProbe,
    ServerServiceProbe,
)
from monitoring.application.value_objects import CheckSettings, WebhookSettings
from monitoring.domain.aggregates import Probe
from monitoring.domain.alert_history import AlertHistoryEntry
from monitoring.domain.value_objects import HttpCheck, ProbeId, ServerId, WebhookCheck
from monitoring.ports.repositories import (
    IAlertHistoryRepository,
    IProbeRepository,
    IServerRepository,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor, probe_ref, server_ref
from shared_kernel.exceptions import ResourceNotFoundError


class ProbeService:
    """Manages probe definitions and exposes their alert history.

    Any member of one of a server's groups may add probes to it; changing
    or deleting a probe requires ADMIN in one of the probe's groups.
    """

    def __init__(
        self,
        session: AsyncSession,
        server_repository: IServerRepository,
        probe_repository: IProbeRepository,
        alert_repository: IAlertHistoryRepository,
        authz: AuthorizationProvider,
        probe: ServerServiceProbe | None = None,
    ):
        self._session = session
        self._server_repository = server_repository
        self._probe_repository = probe_repository
        self._alert_repository = alert_repository
        self._authz = authz
        self._probe = probe or DefaultServerServiceProbe()

    async def list_probes(self, actor: Actor, server_id: ServerId) -> list[Probe]:
        async with self._session.begin():
            await self._authz.require_view(actor, server_ref(server_id.value))
            return await self._probe_repository.list_for_server(server_id)

    async def create_probe(
        self,
        actor: Actor,
        server_id: ServerId,
        name: str,
        settings: CheckSettings,
        group_ids: list[str] | None = None,
    ) -> Probe:
        """Create a probe on a server.

        Without explicit groups the probe inherits the server's groups.
        Explicit groups must be groups the actor belongs to.
        """
        async with self._session.begin():
            await self._authz.require_view(actor, server_ref(server_id.value))
            server = await self._server_repository.get_by_id(server_id)
            if server is None:
                raise ResourceNotFoundError("server", server_id.value)

            if group_ids:
                await self._authz.require_membership(actor, group_ids)
                groups = frozenset(group_ids)
            else:
                groups = server.group_ids

            probe = Probe.create(
                server_id=server_id,
                name=name,
                check=_initial_check(settings),
                group_ids=groups,
            )
            await self._probe_repository.save(probe)

        self._probe.probe_created(probe.id.value, server_id.value, probe.type.value)
        return probe

    async def get_probe(self, actor: Actor, probe_id: ProbeId) -> Probe:
        async with self._session.begin():
            await self._authz.require_view(actor, probe_ref(probe_id.value))
            return await self._load(probe_id)

    async def update_probe(
        self,
        actor: Actor,
        probe_id: ProbeId,
        name: str | None = None,
        settings: CheckSettings | None = None,
        group_ids: list[str] | None = None,
    ) -> Probe:
        """Update a probe's name, check settings or groups.

        Switching a probe to WEBHOOK issues a token; reconfiguring a
        webhook probe keeps its token.
        """
        async with self._session.begin():
            await self._authz.require_administer(actor, probe_ref(probe_id.value))
            probe = await self._load(probe_id, for_update=True)

            new_groups = frozenset(group_ids) if group_ids is not None else None
            if new_groups is not None:
                await self._authz.require_membership(
                    actor, sorted(new_groups - probe.group_ids)
                )
            probe.update(name=name, group_ids=new_groups)

            match settings:
                case HttpCheck():
                    probe.configure_http(settings)
                case WebhookSettings():
                    probe.configure_webhook(settings.expected_payload)

            await self._probe_repository.save(probe)

        self._probe.probe_updated(probe_id.value, probe.type.value)
        return probe

    async def delete_probe(self, actor: Actor, probe_id: ProbeId) -> None:
        async with self._session.begin():
            await self._authz.require_administer(actor, probe_ref(probe_id.value))
            probe = await self._load(probe_id)
            await self._probe_repository.delete(probe)

        self._probe.probe_deleted(probe_id.value)

    async def list_alerts(
        self, actor: Actor, probe_id: ProbeId, limit: int | None = None
    ) -> list[AlertHistoryEntry]:
        async with self._session.begin():
            await self._authz.require_view(actor, probe_ref(probe_id.value))
            return await self._alert_repository.list_for_probe(probe_id, limit)

    async def list_visible_alerts(
        self, actor: Actor, limit: int | None = None
    ) -> list[AlertHistoryEntry]:
        """List alert history of every probe the actor can view."""
        async with self._session.begin():
            visible = await self._authz.visible_group_ids(actor)
            return await self._alert_repository.list_visible(visible, limit)

    async def _load(self, probe_id: ProbeId, for_update: bool = False) -> Probe:
        probe = await self._probe_repository.get_by_id(probe_id, for_update=for_update)
        if probe is None:
            raise ResourceNotFoundError("probe", probe_id.value)
        return probe


def _initial_check(settings: CheckSettings) -> HttpCheck | WebhookCheck:
    match settings:
        case HttpCheck():
            return settings
        case WebhookSettings():
            return WebhookCheck.with_new_token(settings.expected_payload)
