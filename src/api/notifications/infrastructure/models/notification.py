"""SQLAlchemy ORM model for notification history."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base
from notifications.domain.value_objects import NotificationLevel, NotificationStatus


class NotificationModel(Base):
    """ORM model for notifications table.

    References are SET NULL so history outlives the config, server and
    probe it was about.
    """

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    config_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("notification_configs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    server_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("servers.id", ondelete="SET NULL"), nullable=True
    )
    probe_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("probes.id", ondelete="SET NULL"), nullable=True
    )
    level: Mapped[NotificationLevel] = mapped_column(
        Enum(
            NotificationLevel,
            name="notification_level",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    status: Mapped[NotificationStatus] = mapped_column(
        Enum(
            NotificationStatus,
            name="notification_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    status_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
