"""FastAPI wiring for the outbox repository."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.repository import OutboxRepository


def get_outbox_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> OutboxRepository:
    """Outbox bound to the request's write session.

    Entries only become visible to the worker when the service commits.
    """
    return OutboxRepository(session=session)
