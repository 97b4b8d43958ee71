"""Repository protocols (ports) for the notifications context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from notifications.domain.aggregates import Notification, NotificationConfig
from notifications.domain.value_objects import NotificationConfigId


@runtime_checkable
class INotificationConfigRepository(Protocol):
    async def save(self, config: NotificationConfig) -> None:
        """Insert or update the config and its channel sub-row.

        A type switch deletes the previous sub-row and inserts the new
        one in the caller's transaction.
        """
        ...

    async def get_by_id(
        self, config_id: NotificationConfigId
    ) -> NotificationConfig | None:
        """Raises InvariantViolationError if the sub-row matching the type is missing."""
        ...

    async def list_visible(
        self, group_ids: frozenset[str] | None
    ) -> list[NotificationConfig]:
        """List configs of the given groups, most recent first. ``None`` lists all."""
        ...

    async def ids_for_groups(self, group_ids: frozenset[str]) -> list[str]:
        ...

    async def delete(self, config: NotificationConfig) -> bool:
        """Delete the channel sub-row, then the config.

        Past notifications keep their history with no config reference.
        """
        ...


@runtime_checkable
class INotificationRepository(Protocol):
    async def add(self, notification: Notification) -> None:
        ...

    async def list_visible(
        self, group_ids: frozenset[str] | None, limit: int | None = None
    ) -> list[Notification]:
        """List notifications of configs owned by the groups, most recent first."""
        ...


@runtime_checkable
class INotificationStore(Protocol):
    """Short-lived persistence used by the dispatcher.

    Each call runs in its own transaction, never in the transaction of
    the request or event that triggered the dispatch.
    """

    async def load_config(
        self, config_id: NotificationConfigId
    ) -> NotificationConfig | None:
        ...

    async def config_ids_for_groups(self, group_ids: frozenset[str]) -> list[str]:
        ...

    async def record(self, notification: Notification) -> None:
        ...


@runtime_checkable
class IMonitoredObjectLookup(Protocol):
    """Names of the servers and probes a notification refers to."""

    async def server_name(self, server_id: str) -> str | None:
        """Return the server's name, or None if it does not exist."""
        ...

    async def probe_name(self, probe_id: str, server_id: str) -> str | None:
        """Return the name of the server's probe, or None if it does not exist."""
        ...
