"""Server aggregate: a monitored host or service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from monitoring.domain.events import ServerDeleted
from monitoring.domain.value_objects import ServerId, ServerType

if TYPE_CHECKING:
    from monitoring.domain.events import DomainEvent


@dataclass
class Server:
    """A monitored host, attached to at least one group."""

    id: ServerId
    name: str
    type: ServerType
    description: str = ""
    group_ids: frozenset[str] = frozenset()
    created_by_id: str | None = None
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        name: str,
        server_type: ServerType,
        group_ids: frozenset[str],
        created_by_id: str,
        description: str = "",
    ) -> Server:
        """Create a server.

        Raises:
            ValueError: If the name is empty or no group is given
        """
        _validate_name(name)
        _validate_groups(group_ids)
        return cls(
            id=ServerId.generate(),
            name=name,
            type=server_type,
            description=description,
            group_ids=group_ids,
            created_by_id=created_by_id,
        )

    def update(
        self,
        name: str | None = None,
        server_type: ServerType | None = None,
        description: str | None = None,
        group_ids: frozenset[str] | None = None,
    ) -> None:
        """Apply the given changes.

        Raises:
            ValueError: If the name is empty or the group set is emptied
        """
        if group_ids is not None:
            _validate_groups(group_ids)
        if name is not None:
            _validate_name(name)
            self.name = name
        if server_type is not None:
            self.type = server_type
        if description is not None:
            self.description = description
        if group_ids is not None:
            self.group_ids = group_ids

    def mark_for_deletion(self) -> None:
        self._pending_events.append(
            ServerDeleted(
                server_id=self.id.value,
                name=self.name,
                occurred_at=datetime.now(UTC),
            )
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events


def _validate_name(name: str) -> None:
    if not name or not name.strip() or len(name) > 255:
        raise ValueError("Server name must be between 1 and 255 characters")


def _validate_groups(group_ids: frozenset[str]) -> None:
    if not group_ids:
        raise ValueError("A server must be attached to at least one group")
