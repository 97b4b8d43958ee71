"""SQLAlchemy ORM models for notification configurations.

A config row holds the shared fields; exactly one of email_notifications
or webhook_notifications holds the settings for its type.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from notifications.domain.value_objects import ChannelType


class NotificationConfigModel(Base, TimestampMixin):
    __tablename__ = "notification_configs"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type: Mapped[ChannelType] = mapped_column(
        Enum(
            ChannelType,
            name="channel_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<NotificationConfigModel(id={self.id}, type={self.type})>"


class EmailNotificationModel(Base):
    __tablename__ = "email_notifications"

    config_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("notification_configs.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    recipients: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False)


class WebhookNotificationModel(Base):
    __tablename__ = "webhook_notifications"

    config_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("notification_configs.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    headers: Mapped[dict[str, str]] = mapped_column(JSONB, nullable=False, default=dict)
    payload_template: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, default=dict
    )
