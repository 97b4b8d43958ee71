"""HTTP routes for servers and the probes attached to them."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, status

from iam.dependencies.authentication import CurrentActor
from monitoring.application.services import ProbeService, ServerService
from monitoring.dependencies.services import get_probe_service, get_server_service
from monitoring.domain.value_objects import ServerId
from monitoring.presentation.probes.models import ProbeRequest, ProbeResponse
from monitoring.presentation.servers.models import (
    CreateServerRequest,
    ServerResponse,
    UpdateServerRequest,
)
from shared_kernel.exceptions import ResourceNotFoundError

router = APIRouter(
    prefix="/servers",
    tags=["servers"],
)


def _server_id(value: str) -> ServerId:
    try:
        return ServerId.from_string(value)
    except ValueError as e:
        raise ResourceNotFoundError("server", value) from e


@router.get(
    "",
    summary="List servers",
    description="List servers attached to the caller's groups (all servers for super admins)",
)
async def list_servers(
    actor: CurrentActor,
    service: Annotated[ServerService, Depends(get_server_service)],
) -> list[ServerResponse]:
    servers = await service.list_servers(actor)
    return [ServerResponse.from_domain(server) for server in servers]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_server(
    request: CreateServerRequest,
    actor: CurrentActor,
    service: Annotated[ServerService, Depends(get_server_service)],
) -> ServerResponse:
    """Create a server attached to at least one of the caller's groups."""
    server = await service.create_server(
        actor,
        name=request.name,
        server_type=request.type,
        group_ids=request.groups,
        description=request.description,
    )
    return ServerResponse.from_domain(server)


@router.get("/{server_id}")
async def get_server(
    server_id: str,
    actor: CurrentActor,
    service: Annotated[ServerService, Depends(get_server_service)],
) -> ServerResponse:
    server = await service.get_server(actor, _server_id(server_id))
    return ServerResponse.from_domain(server)


@router.patch("/{server_id}")
async def update_server(
    server_id: str,
    request: UpdateServerRequest,
    actor: CurrentActor,
    service: Annotated[ServerService, Depends(get_server_service)],
) -> ServerResponse:
    """Update a server. Requires ADMIN in one of its groups."""
    server = await service.update_server(
        actor,
        _server_id(server_id),
        name=request.name,
        server_type=request.type,
        description=request.description,
        group_ids=request.groups,
    )
    return ServerResponse.from_domain(server)


@router.delete("/{server_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_server(
    server_id: str,
    actor: CurrentActor,
    service: Annotated[ServerService, Depends(get_server_service)],
) -> Response:
    """Delete a server with its probes and their alert history."""
    await service.delete_server(actor, _server_id(server_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{server_id}/probes")
async def list_probes(
    server_id: str,
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
) -> list[ProbeResponse]:
    probes = await service.list_probes(actor, _server_id(server_id))
    return [ProbeResponse.from_domain(probe) for probe in probes]


@router.post("/{server_id}/probes", status_code=status.HTTP_201_CREATED)
async def create_probe(
    server_id: str,
    request: Annotated[ProbeRequest, Body()],
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
) -> ProbeResponse:
    """Create a probe on a server the caller can view.

    WEBHOOK probes receive a token identifying their inbound endpoint.
    """
    probe = await service.create_probe(
        actor,
        _server_id(server_id),
        name=request.name,
        settings=request.to_settings(),
        group_ids=request.groups,
    )
    return ProbeResponse.from_domain(probe)
