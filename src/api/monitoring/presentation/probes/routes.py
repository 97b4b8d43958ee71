"""HTTP routes for probes, result ingestion and webhook deliveries."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Response, status

from iam.dependencies.authentication import CurrentActor
from monitoring.application.services import ProbeService, ProbeStatusTracker
from monitoring.dependencies.services import get_probe_service, get_status_tracker
from monitoring.domain.value_objects import ProbeId
from monitoring.presentation.alerts.models import AlertResponse
from monitoring.presentation.probes.models import (
    CheckResultRequest,
    ProbeRequest,
    ProbeResponse,
    WebhookReceivedResponse,
)
from shared_kernel.exceptions import ResourceNotFoundError

router = APIRouter(
    prefix="/probes",
    tags=["probes"],
)


def _probe_id(value: str) -> ProbeId:
    try:
        return ProbeId.from_string(value)
    except ValueError as e:
        raise ResourceNotFoundError("probe", value) from e


@router.post("/results")
async def record_result(
    request: CheckResultRequest,
    actor: CurrentActor,
    tracker: Annotated[ProbeStatusTracker, Depends(get_status_tracker)],
) -> ProbeResponse:
    """Record a check result reported by the external checker.

    The checker authenticates as a user who administers the probe.
    """
    probe = await tracker.record_result(actor, request.to_result())
    return ProbeResponse.from_domain(probe)


@router.post("/webhook/{token}")
async def receive_webhook(
    token: str,
    tracker: Annotated[ProbeStatusTracker, Depends(get_status_tracker)],
    payload: Annotated[Any, Body()] = None,
) -> WebhookReceivedResponse:
    """Inbound endpoint of a WEBHOOK probe. The token is the credential."""
    probe = await tracker.receive_webhook(token, payload)
    return WebhookReceivedResponse(
        probe_id=probe.id.value, status=probe.status, message=probe.last_message
    )


@router.get("/{probe_id}")
async def get_probe(
    probe_id: str,
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
) -> ProbeResponse:
    probe = await service.get_probe(actor, _probe_id(probe_id))
    return ProbeResponse.from_domain(probe)


@router.put("/{probe_id}")
async def update_probe(
    probe_id: str,
    request: Annotated[ProbeRequest, Body()],
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
) -> ProbeResponse:
    """Replace a probe's settings. Requires ADMIN in one of its groups.

    Switching between HTTP and WEBHOOK replaces the type-specific
    settings; a webhook probe keeps its token.
    """
    probe = await service.update_probe(
        actor,
        _probe_id(probe_id),
        name=request.name,
        settings=request.to_settings(),
        group_ids=request.groups,
    )
    return ProbeResponse.from_domain(probe)


@router.delete("/{probe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_probe(
    probe_id: str,
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
) -> Response:
    await service.delete_probe(actor, _probe_id(probe_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{probe_id}/alerts")
async def list_probe_alerts(
    probe_id: str,
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
) -> list[AlertResponse]:
    """List a probe's alert history, most recent first."""
    entries = await service.list_alerts(actor, _probe_id(probe_id), limit)
    return [AlertResponse.from_domain(entry) for entry in entries]
