"""Notification entity: one dispatch attempt and its outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ulid import ULID

from notifications.domain.value_objects import (
    NotificationEvent,
    NotificationLevel,
    NotificationStatus,
)
from shared_kernel.exceptions import InvariantViolationError


@dataclass
class Notification:
    """Record of a single delivery attempt.

    Moves from PENDING to SENT or FAILED exactly once.
    """

    id: str
    config_id: str | None
    server_id: str | None
    probe_id: str | None
    level: NotificationLevel
    title: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    status: NotificationStatus = NotificationStatus.PENDING
    status_details: str | None = None
    sent_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def attempt(cls, config_id: str, event: NotificationEvent) -> Notification:
        return cls(
            id=str(ULID()),
            config_id=config_id,
            server_id=event.server_id,
            probe_id=event.probe_id,
            level=event.level,
            title=event.title,
            message=event.message,
            details=event.as_payload(),
        )

    def mark_sent(self, at: datetime | None = None) -> None:
        self._ensure_pending()
        self.status = NotificationStatus.SENT
        self.sent_at = at or datetime.now(UTC)

    def mark_failed(self, reason: str) -> None:
        self._ensure_pending()
        self.status = NotificationStatus.FAILED
        self.status_details = reason or "Delivery failed"

    def _ensure_pending(self) -> None:
        if self.status != NotificationStatus.PENDING:
            raise InvariantViolationError(
                f"Notification {self.id} is already {self.status.value}"
            )
