"""SQLAlchemy ORM models for servers and their group attachments."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from monitoring.domain.value_objects import ServerType


class ServerModel(Base, TimestampMixin):
    """ORM model for servers table.

    Probes and group attachments reference the server with RESTRICT
    foreign keys; the repository deletes them first.
    """

    __tablename__ = "servers"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[ServerType] = mapped_column(
        Enum(
            ServerType,
            name="server_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_by_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<ServerModel(id={self.id}, name={self.name})>"


class ServerGroupModel(Base):
    """ORM model for server_groups association table."""

    __tablename__ = "server_groups"

    server_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("servers.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )
