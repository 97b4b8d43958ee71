from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.application.services import UserService
from iam.dependencies.authorization import (
    get_authorization_provider,
    get_group_repository,
)
from iam.infrastructure.group_repository import GroupRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.observability.context import get_observation_context
from infrastructure.outbox.dependencies import get_outbox_repository
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.settings import get_settings
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_user_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> UserServiceProbe:
    return DefaultUserServiceProbe().with_context(context)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    outbox: Annotated[OutboxRepository, Depends(get_outbox_repository)],
) -> UserRepository:
    return UserRepository(session=session, outbox=outbox)


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    All repositories share the request's session via FastAPI dependency
    caching, so the service's transaction covers every read and write.
    """
    return UserService(
        session=session,
        user_repository=user_repo,
        group_repository=group_repo,
        authz=authz,
        default_group_name=get_settings().default_group_name,
        probe=probe,
    )
