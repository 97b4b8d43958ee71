"""Notification configuration application service."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from notifications.application.observability import (
    DefaultNotificationConfigServiceProbe,
    NotificationConfigServiceProbe,
)
from notifications.domain.aggregates import NotificationConfig
from notifications.domain.value_objects import Channel, NotificationConfigId
from notifications.ports.repositories import INotificationConfigRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor, notification_config_ref
from shared_kernel.exceptions import ResourceNotFoundError


class NotificationConfigService:
    """Manages notification configurations.

    Members of a config's group may view it; its ADMINs may change or
    delete it.
    """

    def __init__(
        self,
        session: AsyncSession,
        config_repository: INotificationConfigRepository,
        authz: AuthorizationProvider,
        probe: NotificationConfigServiceProbe | None = None,
    ):
        self._session = session
        self._config_repository = config_repository
        self._authz = authz
        self._probe = probe or DefaultNotificationConfigServiceProbe()

    async def list_configs(self, actor: Actor) -> list[NotificationConfig]:
        async with self._session.begin():
            visible = await self._authz.visible_group_ids(actor)
            return await self._config_repository.list_visible(visible)

    async def create_config(
        self, actor: Actor, name: str, group_id: str, channel: Channel
    ) -> NotificationConfig:
        """Create a configuration for a group the actor belongs to.

        Raises:
            ResourceNotFoundError: If the group does not exist
            AccessDeniedError: If the actor is not a member of the group
        """
        async with self._session.begin():
            await self._authz.require_membership(actor, [group_id])
            config = NotificationConfig.create(
                name=name, group_id=group_id, channel=channel
            )
            await self._config_repository.save(config)

        self._probe.config_created(config.id.value, group_id, config.type.value)
        return config

    async def get_config(
        self, actor: Actor, config_id: NotificationConfigId
    ) -> NotificationConfig:
        async with self._session.begin():
            await self._authz.require_view(
                actor, notification_config_ref(config_id.value)
            )
            return await self._load(config_id)

    async def update_config(
        self,
        actor: Actor,
        config_id: NotificationConfigId,
        name: str | None = None,
        group_id: str | None = None,
        channel: Channel | None = None,
    ) -> NotificationConfig:
        """Update a configuration.

        A new channel replaces the old one; when its type differs, the old
        settings are deleted and the new ones inserted atomically.
        """
        async with self._session.begin():
            await self._authz.require_administer(
                actor, notification_config_ref(config_id.value)
            )
            config = await self._load(config_id)

            if group_id is not None and group_id != config.group_id:
                await self._authz.require_membership(actor, [group_id])

            previous_type = config.type
            config.update(name=name, group_id=group_id, channel=channel)
            await self._config_repository.save(config)

        self._probe.config_updated(config_id.value, config.type != previous_type)
        return config

    async def delete_config(self, actor: Actor, config_id: NotificationConfigId) -> None:
        async with self._session.begin():
            await self._authz.require_administer(
                actor, notification_config_ref(config_id.value)
            )
            config = await self._load(config_id)
            await self._config_repository.delete(config)

        self._probe.config_deleted(config_id.value)

    async def _load(self, config_id: NotificationConfigId) -> NotificationConfig:
        config = await self._config_repository.get_by_id(config_id)
        if config is None:
            raise ResourceNotFoundError("notification_config", config_id.value)
        return config
