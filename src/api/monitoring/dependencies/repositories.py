from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.dependencies import get_outbox_repository
from infrastructure.outbox.repository import OutboxRepository
from monitoring.infrastructure.alert_history_repository import AlertHistoryRepository
from monitoring.infrastructure.probe_repository import ProbeRepository
from monitoring.infrastructure.server_repository import ServerRepository


def get_server_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    outbox: Annotated[OutboxRepository, Depends(get_outbox_repository)],
) -> ServerRepository:
    return ServerRepository(session=session, outbox=outbox)


def get_probe_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    outbox: Annotated[OutboxRepository, Depends(get_outbox_repository)],
) -> ProbeRepository:
    return ProbeRepository(session=session, outbox=outbox)


def get_alert_history_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> AlertHistoryRepository:
    return AlertHistoryRepository(session=session)
