"""FastAPI wiring for the monitoring application services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.authorization import get_authorization_provider
from infrastructure.database.dependencies import get_write_session
from infrastructure.observability.context import get_observation_context
from monitoring.application.observability import (
    DefaultServerServiceProbe,
    DefaultStatusTrackerProbe,
    ServerServiceProbe,
    StatusTrackerProbe,
)
from monitoring.application.services import (
    ProbeService,
    ProbeStatusTracker,
    ServerService,
)
from monitoring.dependencies.repositories import (
    get_alert_history_repository,
    get_probe_repository,
    get_server_repository,
)
from monitoring.infrastructure.alert_history_repository import AlertHistoryRepository
from monitoring.infrastructure.probe_repository import ProbeRepository
from monitoring.infrastructure.server_repository import ServerRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_server_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ServerServiceProbe:
    return DefaultServerServiceProbe().with_context(context)


def get_status_tracker_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> StatusTrackerProbe:
    return DefaultStatusTrackerProbe().with_context(context)


def get_server_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    server_repo: Annotated[ServerRepository, Depends(get_server_repository)],
    probe_repo: Annotated[ProbeRepository, Depends(get_probe_repository)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[ServerServiceProbe, Depends(get_server_service_probe)],
) -> ServerService:
    return ServerService(
        session=session,
        server_repository=server_repo,
        probe_repository=probe_repo,
        authz=authz,
        probe=probe,
    )


def get_probe_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    server_repo: Annotated[ServerRepository, Depends(get_server_repository)],
    probe_repo: Annotated[ProbeRepository, Depends(get_probe_repository)],
    alert_repo: Annotated[
        AlertHistoryRepository, Depends(get_alert_history_repository)
    ],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[ServerServiceProbe, Depends(get_server_service_probe)],
) -> ProbeService:
    return ProbeService(
        session=session,
        server_repository=server_repo,
        probe_repository=probe_repo,
        alert_repository=alert_repo,
        authz=authz,
        probe=probe,
    )


def get_status_tracker(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    server_repo: Annotated[ServerRepository, Depends(get_server_repository)],
    probe_repo: Annotated[ProbeRepository, Depends(get_probe_repository)],
    alert_repo: Annotated[
        AlertHistoryRepository, Depends(get_alert_history_repository)
    ],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[StatusTrackerProbe, Depends(get_status_tracker_probe)],
) -> ProbeStatusTracker:
    """Get the status tracker bound to the request's session."""
    return ProbeStatusTracker(
        session=session,
        server_repository=server_repo,
        probe_repository=probe_repo,
        alert_repository=alert_repo,
        authz=authz,
        probe=probe,
    )
