"""Explicit notification sends, tests and delivery history."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from notifications.application.observability import (
    DefaultNotificationConfigServiceProbe,
    NotificationConfigServiceProbe,
)
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.application.value_objects import DispatchOutcome
from notifications.domain.aggregates import Notification
from notifications.domain.value_objects import (
    NotificationConfigId,
    NotificationEvent,
    NotificationLevel,
)
from notifications.ports.repositories import (
    IMonitoredObjectLookup,
    INotificationRepository,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import (
    Actor,
    notification_config_ref,
    server_ref,
)
from shared_kernel.exceptions import ResourceNotFoundError


class NotificationService:
    """Authorizes explicit sends, then hands them to the dispatcher.

    The authorization transaction is committed before the channel adapter
    runs; the dispatcher records the notification in its own transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        notification_repository: INotificationRepository,
        monitored_objects: IMonitoredObjectLookup,
        authz: AuthorizationProvider,
        dispatcher: NotificationDispatcher,
        probe: NotificationConfigServiceProbe | None = None,
    ):
        self._session = session
        self._notification_repository = notification_repository
        self._monitored_objects = monitored_objects
        self._authz = authz
        self._dispatcher = dispatcher
        self._probe = probe or DefaultNotificationConfigServiceProbe()

    async def send(
        self,
        actor: Actor,
        config_id: NotificationConfigId,
        server_id: str,
        level: NotificationLevel,
        title: str,
        message: str,
        probe_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> DispatchOutcome:
        """Send a notification about a server through a configuration.

        Raises:
            ResourceNotFoundError: If the config, server or probe does not exist
            AccessDeniedError: If the actor cannot view the config or server
        """
        async with self._session.begin():
            server_name, probe_name = await self._authorize(
                actor, config_id, server_id, probe_id
            )

        self._probe.send_requested(config_id.value, server_id, actor.user_id)
        event = NotificationEvent(
            level=level,
            title=title,
            message=message,
            server_id=server_id,
            server_name=server_name,
            probe_id=probe_id,
            probe_name=probe_name,
            timestamp=datetime.now(UTC),
            details=details or {},
        )
        return await self._dispatcher.send(config_id.value, event)

    async def test(
        self, actor: Actor, config_id: NotificationConfigId, server_id: str
    ) -> DispatchOutcome:
        async with self._session.begin():
            server_name, _ = await self._authorize(actor, config_id, server_id, None)

        self._probe.send_requested(config_id.value, server_id, actor.user_id)
        return await self._dispatcher.test(config_id.value, server_id, server_name)

    async def list_history(
        self, actor: Actor, limit: int | None = None
    ) -> list[Notification]:
        """List notifications of configs the actor can view, most recent first."""
        async with self._session.begin():
            visible = await self._authz.visible_group_ids(actor)
            return await self._notification_repository.list_visible(visible, limit)

    async def _authorize(
        self,
        actor: Actor,
        config_id: NotificationConfigId,
        server_id: str,
        probe_id: str | None,
    ) -> tuple[str, str | None]:
        await self._authz.require_view(actor, notification_config_ref(config_id.value))
        await self._authz.require_view(actor, server_ref(server_id))

        server_name = await self._monitored_objects.server_name(server_id)
        if server_name is None:
            raise ResourceNotFoundError("server", server_id)

        probe_name = None
        if probe_id is not None:
            probe_name = await self._monitored_objects.probe_name(probe_id, server_id)
            if probe_name is None:
                raise ResourceNotFoundError("probe", probe_id)
        return server_name, probe_name
