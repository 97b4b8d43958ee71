"""HTTP routes for notification configurations and explicit sends."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, status

from iam.dependencies.authentication import CurrentActor
from notifications.application.services import (
    NotificationConfigService,
    NotificationService,
)
from notifications.dependencies.services import (
    get_notification_config_service,
    get_notification_service,
)
from notifications.domain.value_objects import NotificationConfigId
from notifications.presentation.configs.models import (
    NotificationConfigRequest,
    NotificationConfigResponse,
    SendNotificationRequest,
    TestNotificationRequest,
)
from notifications.presentation.history.models import DispatchResponse
from shared_kernel.exceptions import ResourceNotFoundError

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


def _config_id(value: str) -> NotificationConfigId:
    try:
        return NotificationConfigId.from_string(value)
    except ValueError as e:
        raise ResourceNotFoundError("notification_config", value) from e


@router.get("")
async def list_configs(
    actor: CurrentActor,
    service: Annotated[
        NotificationConfigService, Depends(get_notification_config_service)
    ],
) -> list[NotificationConfigResponse]:
    configs = await service.list_configs(actor)
    return [NotificationConfigResponse.from_domain(config) for config in configs]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_config(
    request: Annotated[NotificationConfigRequest, Body()],
    actor: CurrentActor,
    service: Annotated[
        NotificationConfigService, Depends(get_notification_config_service)
    ],
) -> NotificationConfigResponse:
    """Create a configuration for a group the caller belongs to."""
    config = await service.create_config(
        actor,
        name=request.name,
        group_id=request.group_id,
        channel=request.to_channel(),
    )
    return NotificationConfigResponse.from_domain(config)


@router.post("/send")
async def send_notification(
    request: SendNotificationRequest,
    actor: CurrentActor,
    service: Annotated[NotificationService, Depends(get_notification_service)],
) -> DispatchResponse:
    """Send a notification about a server through a configuration.

    Delivery failures are reported in the body with ``delivered`` false;
    the notification is recorded either way.
    """
    outcome = await service.send(
        actor,
        _config_id(request.config_id),
        server_id=request.server_id,
        level=request.level,
        title=request.title,
        message=request.message,
        probe_id=request.probe_id,
        details=request.details,
    )
    return DispatchResponse.from_outcome(outcome)


@router.get("/{config_id}")
async def get_config(
    config_id: str,
    actor: CurrentActor,
    service: Annotated[
        NotificationConfigService, Depends(get_notification_config_service)
    ],
) -> NotificationConfigResponse:
    config = await service.get_config(actor, _config_id(config_id))
    return NotificationConfigResponse.from_domain(config)


@router.put("/{config_id}")
async def update_config(
    config_id: str,
    request: Annotated[NotificationConfigRequest, Body()],
    actor: CurrentActor,
    service: Annotated[
        NotificationConfigService, Depends(get_notification_config_service)
    ],
) -> NotificationConfigResponse:
    """Replace a configuration. Changing ``type`` discards the old settings."""
    config = await service.update_config(
        actor,
        _config_id(config_id),
        name=request.name,
        group_id=request.group_id,
        channel=request.to_channel(),
    )
    return NotificationConfigResponse.from_domain(config)


@router.delete("/{config_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_config(
    config_id: str,
    actor: CurrentActor,
    service: Annotated[
        NotificationConfigService, Depends(get_notification_config_service)
    ],
) -> Response:
    await service.delete_config(actor, _config_id(config_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{config_id}/test")
async def test_config(
    config_id: str,
    request: TestNotificationRequest,
    actor: CurrentActor,
    service: Annotated[NotificationService, Depends(get_notification_service)],
) -> DispatchResponse:
    """Send a test message through a configuration."""
    outcome = await service.test(actor, _config_id(config_id), request.server_id)
    return DispatchResponse.from_outcome(outcome)
