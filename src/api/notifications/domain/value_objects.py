"""Value objects for the notifications domain.

A notification configuration holds exactly one channel variant; its
type is derived from which variant it holds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ulid import ULID


@dataclass(frozen=True)
class NotificationConfigId:
    """Identifier for a NotificationConfig aggregate (ULID)."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> NotificationConfigId:
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> NotificationConfigId:
        """Raises ValueError if value is not a valid ULID."""
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid NotificationConfigId: {value}") from e
        return cls(value=value)


class ChannelType(StrEnum):
    EMAIL = "EMAIL"
    WEBHOOK = "WEBHOOK"


class NotificationLevel(StrEnum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class NotificationStatus(StrEnum):
    """Delivery status of a notification. SENT and FAILED are terminal."""

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


@dataclass(frozen=True)
class EmailChannel:
    """Email delivery settings. At least one recipient is required."""

    recipients: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.recipients:
            raise ValueError("An email channel needs at least one recipient")

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.EMAIL


@dataclass(frozen=True)
class WebhookChannel:
    """Webhook delivery settings.

    ``payload_template`` is merged with the event fields on delivery.
    """

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    payload_template: dict[str, Any] = field(default_factory=dict)

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.WEBHOOK


Channel = EmailChannel | WebhookChannel


@dataclass(frozen=True)
class NotificationEvent:
    """What a notification is about."""

    level: NotificationLevel
    title: str
    message: str
    server_id: str
    server_name: str
    timestamp: datetime
    probe_id: str | None = None
    probe_name: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def as_payload(self) -> dict[str, Any]:
        """Event fields as sent to webhooks and stored with the notification."""
        return {
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "server_id": self.server_id,
            "server_name": self.server_name,
            "probe_id": self.probe_id,
            "probe_name": self.probe_name,
            "timestamp": self.timestamp.isoformat(),
            "details": dict(self.details),
        }
