"""Pydantic models for server API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from monitoring.domain.aggregates import Server
from monitoring.domain.value_objects import ServerType


class CreateServerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: ServerType
    description: str = ""
    groups: list[str] = Field(
        default_factory=list, description="Groups the server is attached to"
    )


class UpdateServerRequest(BaseModel):
    """Partial update. ``groups`` replaces the attachments when present."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: ServerType | None = None
    description: str | None = None
    groups: list[str] | None = None


class ServerResponse(BaseModel):
    id: str
    name: str
    type: ServerType
    description: str
    groups: list[str]
    created_by_id: str | None = None

    @classmethod
    def from_domain(cls, server: Server) -> ServerResponse:
        return cls(
            id=server.id.value,
            name=server.name,
            type=server.type,
            description=server.description,
            groups=sorted(server.group_ids),
            created_by_id=server.created_by_id,
        )
