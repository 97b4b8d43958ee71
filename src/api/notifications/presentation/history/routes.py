"""HTTP routes for notification delivery history."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from iam.dependencies.authentication import CurrentActor
from notifications.application.services import NotificationService
from notifications.dependencies.services import get_notification_service
from notifications.presentation.history.models import NotificationResponse

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get(
    "/history",
    summary="List notification history",
    description="Notifications sent through configurations the caller can view, most recent first",
)
async def list_history(
    actor: CurrentActor,
    service: Annotated[NotificationService, Depends(get_notification_service)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[NotificationResponse]:
    notifications = await service.list_history(actor, limit)
    return [NotificationResponse.from_domain(n) for n in notifications]
