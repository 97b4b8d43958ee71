"""Pydantic models for notification history and dispatch outcomes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from notifications.application.value_objects import DispatchOutcome
from notifications.domain.aggregates import Notification
from notifications.domain.value_objects import NotificationLevel, NotificationStatus


class NotificationResponse(BaseModel):
    id: str
    config_id: str | None
    server_id: str | None
    probe_id: str | None
    level: NotificationLevel
    title: str
    message: str
    details: dict[str, Any]
    status: NotificationStatus
    status_details: str | None
    sent_at: datetime | None
    created_at: datetime

    @classmethod
    def from_domain(cls, notification: Notification) -> NotificationResponse:
        return cls(
            id=notification.id,
            config_id=notification.config_id,
            server_id=notification.server_id,
            probe_id=notification.probe_id,
            level=notification.level,
            title=notification.title,
            message=notification.message,
            details=dict(notification.details),
            status=notification.status,
            status_details=notification.status_details,
            sent_at=notification.sent_at,
            created_at=notification.created_at,
        )


class DispatchResponse(BaseModel):
    """Outcome of an explicit send or test.

    ``delivered`` is false when the channel rejected the message; the
    notification is then recorded as FAILED with the reason.
    """

    notification: NotificationResponse
    delivered: bool
    result: Any = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: DispatchOutcome) -> DispatchResponse:
        return cls(
            notification=NotificationResponse.from_domain(outcome.notification),
            delivered=outcome.delivered,
            result=outcome.result,
            error=outcome.error,
        )
