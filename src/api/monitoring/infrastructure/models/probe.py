"""SQLAlchemy ORM models for probes.

A probe row holds the shared fields; exactly one of http_probes or
webhook_probes holds the settings for its type.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from monitoring.domain.value_objects import HttpMethod, ProbeStatus, ProbeType

probe_status_enum = Enum(
    ProbeStatus,
    name="probe_status",
    values_callable=lambda e: [m.value for m in e],
)


class ProbeModel(Base, TimestampMixin):
    """ORM model for probes table."""

    __tablename__ = "probes"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    server_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("servers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[ProbeType] = mapped_column(
        Enum(
            ProbeType,
            name="probe_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    status: Mapped[ProbeStatus] = mapped_column(
        probe_status_enum, nullable=False, default=ProbeStatus.UNKNOWN
    )
    last_checked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ProbeModel(id={self.id}, type={self.type}, status={self.status})>"


class ProbeGroupModel(Base):
    """ORM model for probe_groups association table."""

    __tablename__ = "probe_groups"

    probe_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("probes.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )


class HttpProbeModel(Base):
    """Settings of an HTTP probe."""

    __tablename__ = "http_probes"

    probe_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("probes.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    method: Mapped[HttpMethod] = mapped_column(
        Enum(
            HttpMethod,
            name="http_method",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    headers: Mapped[dict[str, str]] = mapped_column(JSONB, nullable=False, default=dict)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected_status: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expected_keyword: Mapped[str | None] = mapped_column(Text, nullable=True)
    timeout_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    check_interval_s: Mapped[int] = mapped_column(Integer, nullable=False)


class WebhookProbeModel(Base):
    """Settings of a WEBHOOK probe.

    The token is globally unique; a NULL expected_payload accepts any payload.
    """

    __tablename__ = "webhook_probes"

    probe_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("probes.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    expected_payload: Mapped[Any] = mapped_column(
        JSONB(none_as_null=True), nullable=True
    )
