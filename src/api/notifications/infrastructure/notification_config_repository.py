"""PostgreSQL implementation of INotificationConfigRepository.

The config row and its channel sub-row are written in the caller's
transaction. A type switch deletes the old sub-row before inserting the
new one, so a failure on either write rolls back both.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notifications.domain.aggregates import NotificationConfig
from notifications.domain.value_objects import (
    Channel,
    ChannelType,
    EmailChannel,
    NotificationConfigId,
    WebhookChannel,
)
from notifications.infrastructure.models import (
    EmailNotificationModel,
    NotificationConfigModel,
    WebhookNotificationModel,
)
from notifications.infrastructure.observability import (
    DefaultNotificationsInfrastructureProbe,
    NotificationsInfrastructureProbe,
)
from notifications.ports.repositories import INotificationConfigRepository
from shared_kernel.exceptions import InvariantViolationError


class NotificationConfigRepository(INotificationConfigRepository):
    """Never commits: the calling service owns the transaction boundary."""

    def __init__(
        self,
        session: AsyncSession,
        probe: NotificationsInfrastructureProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultNotificationsInfrastructureProbe()

    async def save(self, config: NotificationConfig) -> None:
        model = await self._session.get(NotificationConfigModel, config.id.value)
        if model is None:
            model = NotificationConfigModel(id=config.id.value)
            self._session.add(model)
        elif model.type != config.type:
            self._probe.channel_switched(
                config.id.value, model.type.value, config.type.value
            )
        model.name = config.name
        model.group_id = config.group_id
        model.type = config.type
        await self._session.flush()

        await self._save_channel(config.id.value, config.channel)
        self._probe.config_saved(config.id.value, config.type.value)

    async def _save_channel(self, config_id: str, channel: Channel) -> None:
        match channel:
            case EmailChannel():
                await self._session.execute(
                    delete(WebhookNotificationModel).where(
                        WebhookNotificationModel.config_id == config_id
                    )
                )
                row = await self._session.get(EmailNotificationModel, config_id)
                if row is None:
                    row = EmailNotificationModel(config_id=config_id)
                    self._session.add(row)
                row.recipients = list(channel.recipients)
            case WebhookChannel():
                await self._session.execute(
                    delete(EmailNotificationModel).where(
                        EmailNotificationModel.config_id == config_id
                    )
                )
                row = await self._session.get(WebhookNotificationModel, config_id)
                if row is None:
                    row = WebhookNotificationModel(config_id=config_id)
                    self._session.add(row)
                row.url = channel.url
                row.headers = dict(channel.headers)
                row.payload_template = dict(channel.payload_template)
        await self._session.flush()

    async def get_by_id(
        self, config_id: NotificationConfigId
    ) -> NotificationConfig | None:
        model = await self._session.get(NotificationConfigModel, config_id.value)
        if model is None:
            return None
        return await self._to_domain(model)

    async def list_visible(
        self, group_ids: frozenset[str] | None
    ) -> list[NotificationConfig]:
        stmt = select(NotificationConfigModel).order_by(
            NotificationConfigModel.created_at.desc(), NotificationConfigModel.id
        )
        if group_ids is not None:
            if not group_ids:
                return []
            stmt = stmt.where(NotificationConfigModel.group_id.in_(group_ids))
        result = await self._session.execute(stmt)
        return [await self._to_domain(model) for model in result.scalars().all()]

    async def ids_for_groups(self, group_ids: frozenset[str]) -> list[str]:
        if not group_ids:
            return []
        stmt = (
            select(NotificationConfigModel.id)
            .where(NotificationConfigModel.group_id.in_(group_ids))
            .order_by(NotificationConfigModel.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, config: NotificationConfig) -> bool:
        model = await self._session.get(NotificationConfigModel, config.id.value)
        if model is None:
            return False

        for sub_model in (EmailNotificationModel, WebhookNotificationModel):
            await self._session.execute(
                delete(sub_model).where(sub_model.config_id == config.id.value)
            )
        await self._session.delete(model)
        await self._session.flush()
        self._probe.config_deleted(config.id.value)
        return True

    async def _to_domain(self, model: NotificationConfigModel) -> NotificationConfig:
        return NotificationConfig(
            id=NotificationConfigId(value=model.id),
            name=model.name,
            group_id=model.group_id,
            channel=await self._load_channel(model),
        )

    async def _load_channel(self, model: NotificationConfigModel) -> Channel:
        if model.type == ChannelType.EMAIL:
            email = await self._session.get(EmailNotificationModel, model.id)
            if email is None:
                raise InvariantViolationError(
                    f"EMAIL notification config {model.id} has no email_notifications row"
                )
            return EmailChannel(recipients=tuple(email.recipients))

        webhook = await self._session.get(WebhookNotificationModel, model.id)
        if webhook is None:
            raise InvariantViolationError(
                f"WEBHOOK notification config {model.id} has no webhook_notifications row"
            )
        return WebhookChannel(
            url=webhook.url,
            headers=dict(webhook.headers or {}),
            payload_template=dict(webhook.payload_template or {}),
        )
