"""Wiring for the authorization engine.

The ownership graph combines one resolver per bounded context; every
piece shares the request's database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.services import AuthorizationService
from iam.infrastructure.group_repository import GroupRepository
from iam.infrastructure.ownership import GroupOwnershipResolver
from infrastructure.authorization import CompositeOwnershipGraph
from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.dependencies import get_outbox_repository
from infrastructure.outbox.repository import OutboxRepository
from monitoring.infrastructure.ownership import (
    ProbeOwnershipResolver,
    ServerOwnershipResolver,
)
from notifications.infrastructure.ownership import NotificationConfigOwnershipResolver
from shared_kernel.authorization.protocols import (
    AuthorizationProvider,
    IResourceOwnershipGraph,
)


def get_group_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    outbox: Annotated[OutboxRepository, Depends(get_outbox_repository)],
) -> GroupRepository:
    return GroupRepository(session=session, outbox=outbox)


def get_ownership_graph(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> IResourceOwnershipGraph:
    return CompositeOwnershipGraph(
        [
            GroupOwnershipResolver(session),
            ServerOwnershipResolver(session),
            ProbeOwnershipResolver(session),
            NotificationConfigOwnershipResolver(session),
        ]
    )


def get_authorization_provider(
    group_repository: Annotated[GroupRepository, Depends(get_group_repository)],
    ownership_graph: Annotated[
        IResourceOwnershipGraph, Depends(get_ownership_graph)
    ],
) -> AuthorizationProvider:
    """Get the authorization engine bound to the request's session."""
    return AuthorizationService(
        group_repository=group_repository,
        ownership_graph=ownership_graph,
    )
