"""PostgreSQL implementation of INotificationRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notifications.domain.aggregates import Notification
from notifications.infrastructure.models import (
    NotificationConfigModel,
    NotificationModel,
)
from notifications.ports.repositories import INotificationRepository


class NotificationRepository(INotificationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, notification: Notification) -> None:
        self._session.add(
            NotificationModel(
                id=notification.id,
                config_id=notification.config_id,
                server_id=notification.server_id,
                probe_id=notification.probe_id,
                level=notification.level,
                title=notification.title,
                message=notification.message,
                details=notification.details,
                status=notification.status,
                status_details=notification.status_details,
                sent_at=notification.sent_at,
                created_at=notification.created_at,
            )
        )
        await self._session.flush()

    async def list_visible(
        self, group_ids: frozenset[str] | None, limit: int | None = None
    ) -> list[Notification]:
        stmt = select(NotificationModel).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if group_ids is not None:
            if not group_ids:
                return []
            owned = select(NotificationConfigModel.id).where(
                NotificationConfigModel.group_id.in_(group_ids)
            )
            stmt = stmt.where(NotificationModel.config_id.in_(owned))

        result = await self._session.execute(stmt.limit(limit))
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            config_id=model.config_id,
            server_id=model.server_id,
            probe_id=model.probe_id,
            level=model.level,
            title=model.title,
            message=model.message,
            details=dict(model.details or {}),
            status=model.status,
            status_details=model.status_details,
            sent_at=model.sent_at,
            created_at=model.created_at,
        )
