"""HTTP routes for the alert history ledger."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from iam.dependencies.authentication import CurrentActor
from monitoring.application.services import ProbeService
from monitoring.dependencies.services import get_probe_service
from monitoring.presentation.alerts.models import AlertResponse

router = APIRouter(
    prefix="/alerts",
    tags=["alerts"],
)


@router.get(
    "",
    summary="List alert history",
    description="List alerts of every probe visible to the caller, most recent first",
)
async def list_alerts(
    actor: CurrentActor,
    service: Annotated[ProbeService, Depends(get_probe_service)],
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
) -> list[AlertResponse]:
    entries = await service.list_visible_alerts(actor, limit)
    return [AlertResponse.from_domain(entry) for entry in entries]
