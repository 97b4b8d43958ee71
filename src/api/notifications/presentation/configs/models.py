"""Pydantic models for notification configuration requests and responses.

A configuration is either EMAIL or WEBHOOK; the request body is a
discriminated union on ``type`` so only the matching settings are
accepted.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, EmailStr, Field, HttpUrl

from notifications.domain.aggregates import NotificationConfig
from notifications.domain.value_objects import (
    Channel,
    ChannelType,
    EmailChannel,
    NotificationLevel,
    WebhookChannel,
)


class EmailConfig(BaseModel):
    recipients: list[EmailStr] = Field(..., min_length=1)


class WebhookConfig(BaseModel):
    url: HttpUrl
    headers: dict[str, str] = Field(default_factory=dict)
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Template merged with the event fields on delivery",
    )


class _ConfigRequestBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    group_id: str


class EmailConfigRequest(_ConfigRequestBase):
    type: Literal["EMAIL"]
    email_config: EmailConfig

    def to_channel(self) -> Channel:
        return EmailChannel(recipients=tuple(str(r) for r in self.email_config.recipients))


class WebhookConfigRequest(_ConfigRequestBase):
    type: Literal["WEBHOOK"]
    webhook_config: WebhookConfig

    def to_channel(self) -> Channel:
        return WebhookChannel(
            url=str(self.webhook_config.url),
            headers=dict(self.webhook_config.headers),
            payload_template=dict(self.webhook_config.payload),
        )


NotificationConfigRequest = Annotated[
    EmailConfigRequest | WebhookConfigRequest, Field(discriminator="type")
]


class NotificationConfigResponse(BaseModel):
    id: str
    name: str
    type: ChannelType
    group_id: str
    email_config: EmailConfig | None = None
    webhook_config: WebhookConfig | None = None

    @classmethod
    def from_domain(cls, config: NotificationConfig) -> NotificationConfigResponse:
        channel = config.channel
        email_config = None
        webhook_config = None
        if isinstance(channel, EmailChannel):
            email_config = EmailConfig(recipients=list(channel.recipients))
        else:
            webhook_config = WebhookConfig(
                url=channel.url,
                headers=dict(channel.headers),
                payload=dict(channel.payload_template),
            )
        return cls(
            id=config.id.value,
            name=config.name,
            type=config.type,
            group_id=config.group_id,
            email_config=email_config,
            webhook_config=webhook_config,
        )


class SendNotificationRequest(BaseModel):
    config_id: str
    server_id: str
    probe_id: str | None = None
    level: NotificationLevel
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    details: dict[str, Any] = Field(default_factory=dict)


class TestNotificationRequest(BaseModel):
    server_id: str
