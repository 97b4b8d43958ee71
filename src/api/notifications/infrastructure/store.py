"""Session-owning persistence for the dispatcher."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notifications.domain.aggregates import Notification, NotificationConfig
from notifications.domain.value_objects import NotificationConfigId
from notifications.infrastructure.notification_config_repository import (
    NotificationConfigRepository,
)
from notifications.infrastructure.notification_repository import (
    NotificationRepository,
)
from notifications.ports.repositories import INotificationStore


class SqlNotificationStore(INotificationStore):
    """Opens a short transaction per call from the session factory.

    Dispatch runs outside of any request or outbox transaction, so the
    notification row is written whether or not the trigger committed
    anything else.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_config(
        self, config_id: NotificationConfigId
    ) -> NotificationConfig | None:
        async with self._session_factory() as session, session.begin():
            return await NotificationConfigRepository(session).get_by_id(config_id)

    async def config_ids_for_groups(self, group_ids: frozenset[str]) -> list[str]:
        async with self._session_factory() as session, session.begin():
            return await NotificationConfigRepository(session).ids_for_groups(group_ids)

    async def record(self, notification: Notification) -> None:
        async with self._session_factory() as session, session.begin():
            await NotificationRepository(session).add(notification)
