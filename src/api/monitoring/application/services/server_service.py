"""Server application service."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.application.observability import (
    DefaultServerServiceProbe,
    ServerServiceProbe,
)
from monitoring.domain.aggregates import Server
from monitoring.domain.value_objects import ServerId, ServerType
from monitoring.ports.repositories import IProbeRepository, IServerRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor, server_ref
from shared_kernel.exceptions import InvalidInputError, ResourceNotFoundError


class ServerService:
    """Manages servers. Checks and writes share one transaction."""

    def __init__(
        self,
        session: AsyncSession,
        server_repository: IServerRepository,
        probe_repository: IProbeRepository,
        authz: AuthorizationProvider,
        probe: ServerServiceProbe | None = None,
    ):
        self._session = session
        self._server_repository = server_repository
        self._probe_repository = probe_repository
        self._authz = authz
        self._probe = probe or DefaultServerServiceProbe()

    async def create_server(
        self,
        actor: Actor,
        name: str,
        server_type: ServerType,
        group_ids: list[str],
        description: str = "",
    ) -> Server:
        """Create a server attached to groups the actor belongs to.

        Raises:
            InvalidInputError: If no group is given
            ResourceNotFoundError: If a group does not exist
            AccessDeniedError: If the actor is not a member of a group
        """
        if not group_ids:
            raise InvalidInputError(
                "Invalid server", errors={"groups": "At least one group is required"}
            )

        async with self._session.begin():
            await self._authz.require_membership(actor, group_ids)
            server = Server.create(
                name=name,
                server_type=server_type,
                group_ids=frozenset(group_ids),
                created_by_id=actor.user_id,
                description=description,
            )
            await self._server_repository.save(server)

        self._probe.server_created(server.id.value, name, sorted(server.group_ids))
        return server

    async def list_servers(self, actor: Actor) -> list[Server]:
        """List the servers visible to the actor, ordered by name."""
        async with self._session.begin():
            visible = await self._authz.visible_group_ids(actor)
            return await self._server_repository.list_visible(visible)

    async def get_server(self, actor: Actor, server_id: ServerId) -> Server:
        async with self._session.begin():
            await self._authz.require_view(actor, server_ref(server_id.value))
            return await self._load(server_id)

    async def update_server(
        self,
        actor: Actor,
        server_id: ServerId,
        name: str | None = None,
        server_type: ServerType | None = None,
        description: str | None = None,
        group_ids: list[str] | None = None,
    ) -> Server:
        """Update a server; newly attached groups must be the actor's own.

        Raises:
            InvalidInputError: If ``group_ids`` is given but empty
        """
        if group_ids is not None and not group_ids:
            raise InvalidInputError(
                "Invalid server", errors={"groups": "At least one group is required"}
            )

        async with self._session.begin():
            await self._authz.require_administer(actor, server_ref(server_id.value))
            server = await self._load(server_id)

            new_groups = frozenset(group_ids) if group_ids is not None else None
            if new_groups is not None:
                await self._authz.require_membership(
                    actor, sorted(new_groups - server.group_ids)
                )

            server.update(
                name=name,
                server_type=server_type,
                description=description,
                group_ids=new_groups,
            )
            await self._server_repository.save(server)

        self._probe.server_updated(server_id.value)
        return server

    async def delete_server(self, actor: Actor, server_id: ServerId) -> None:
        """Delete a server together with its probes and their alert history."""
        async with self._session.begin():
            await self._authz.require_administer(actor, server_ref(server_id.value))
            server = await self._load(server_id)

            probes = await self._probe_repository.list_for_server(server_id)
            for probe in probes:
                await self._probe_repository.delete(probe)

            server.mark_for_deletion()
            await self._server_repository.delete(server)

        self._probe.server_deleted(server_id.value, len(probes))

    async def _load(self, server_id: ServerId) -> Server:
        server = await self._server_repository.get_by_id(server_id)
        if server is None:
            raise ResourceNotFoundError("server", server_id.value)
        return server
