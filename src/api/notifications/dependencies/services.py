"""FastAPI wiring for the notifications application services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.authorization import get_authorization_provider
from infrastructure.database.dependencies import get_write_session
from infrastructure.observability.context import get_observation_context
from notifications.application.observability import (
    DefaultNotificationConfigServiceProbe,
    NotificationConfigServiceProbe,
)
from notifications.application.services import (
    NotificationConfigService,
    NotificationDispatcher,
    NotificationService,
)
from notifications.dependencies.dispatch import get_notification_dispatcher
from notifications.infrastructure.monitored_objects import SqlMonitoredObjectLookup
from notifications.infrastructure.notification_config_repository import (
    NotificationConfigRepository,
)
from notifications.infrastructure.notification_repository import (
    NotificationRepository,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_notification_config_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> NotificationConfigServiceProbe:
    return DefaultNotificationConfigServiceProbe().with_context(context)


def get_notification_config_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> NotificationConfigRepository:
    return NotificationConfigRepository(session=session)


def get_notification_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> NotificationRepository:
    return NotificationRepository(session=session)


def get_notification_config_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    config_repo: Annotated[
        NotificationConfigRepository, Depends(get_notification_config_repository)
    ],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[
        NotificationConfigServiceProbe, Depends(get_notification_config_service_probe)
    ],
) -> NotificationConfigService:
    return NotificationConfigService(
        session=session,
        config_repository=config_repo,
        authz=authz,
        probe=probe,
    )


def get_notification_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    notification_repo: Annotated[
        NotificationRepository, Depends(get_notification_repository)
    ],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    dispatcher: Annotated[
        NotificationDispatcher, Depends(get_notification_dispatcher)
    ],
    probe: Annotated[
        NotificationConfigServiceProbe, Depends(get_notification_config_service_probe)
    ],
) -> NotificationService:
    return NotificationService(
        session=session,
        notification_repository=notification_repo,
        monitored_objects=SqlMonitoredObjectLookup(session),
        authz=authz,
        dispatcher=dispatcher,
        probe=probe,
    )
