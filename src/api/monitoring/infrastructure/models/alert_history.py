"""SQLAlchemy ORM model for the alert history ledger."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base
from monitoring.domain.value_objects import ProbeStatus
from monitoring.infrastructure.models.probe import probe_status_enum


class AlertHistoryModel(Base):
    """ORM model for alert_history table.

    The partial unique index allows at most one unresolved entry per probe.
    """

    __tablename__ = "alert_history"
    __table_args__ = (
        Index(
            "uq_alert_history_open_probe",
            "probe_id",
            unique=True,
            postgresql_where=text("resolved = false"),
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    probe_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("probes.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[ProbeStatus] = mapped_column(probe_status_enum, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
