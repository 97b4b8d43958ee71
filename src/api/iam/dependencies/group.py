from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultGroupServiceProbe,
    DefaultMembershipServiceProbe,
    GroupServiceProbe,
    MembershipServiceProbe,
)
from iam.application.services import GroupService, MembershipService
from iam.dependencies.authorization import (
    get_authorization_provider,
    get_group_repository,
    get_ownership_graph,
)
from iam.dependencies.user import get_user_repository
from iam.infrastructure.group_repository import GroupRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.observability.context import get_observation_context
from shared_kernel.authorization.protocols import (
    AuthorizationProvider,
    IResourceOwnershipGraph,
)
from shared_kernel.observability_context import ObservationContext


def get_group_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> GroupServiceProbe:
    """Get a GroupServiceProbe bound to the request."""
    return DefaultGroupServiceProbe().with_context(context)


def get_membership_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> MembershipServiceProbe:
    return DefaultMembershipServiceProbe().with_context(context)


def get_group_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    ownership_graph: Annotated[
        IResourceOwnershipGraph, Depends(get_ownership_graph)
    ],
    probe: Annotated[GroupServiceProbe, Depends(get_group_service_probe)],
) -> GroupService:
    return GroupService(
        session=session,
        group_repository=group_repo,
        authz=authz,
        ownership_graph=ownership_graph,
        probe=probe,
    )


def get_membership_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[
        MembershipServiceProbe, Depends(get_membership_service_probe)
    ],
) -> MembershipService:
    return MembershipService(
        session=session,
        group_repository=group_repo,
        user_repository=user_repo,
        authz=authz,
        probe=probe,
    )
