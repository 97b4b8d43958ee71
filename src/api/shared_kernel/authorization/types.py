"""Authorization type definitions.

Defines the roles, resource kinds and actor descriptor used by the
authorization engine and by every bounded context that asks it questions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ResourceType(StrEnum):
    """Kinds of group-scoped resources."""

    GROUP = "group"
    SERVER = "server"
    PROBE = "probe"
    NOTIFICATION_CONFIG = "notification_config"


class GlobalRole(StrEnum):
    """System-wide role of a user."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    USER = "USER"


class GroupRole(StrEnum):
    """Role of a user within one group."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


@dataclass(frozen=True)
class Actor:
    """The authenticated user on whose behalf an operation runs.

    The global role is always read from storage, never from token claims.
    """

    user_id: str
    role: GlobalRole

    @property
    def is_super_admin(self) -> bool:
        return self.role == GlobalRole.SUPER_ADMIN


@dataclass(frozen=True)
class ResourceRef:
    """Reference to a group-scoped resource."""

    resource_type: ResourceType
    resource_id: str

    def __str__(self) -> str:
        return f"{self.resource_type}:{self.resource_id}"


def group_ref(group_id: str) -> ResourceRef:
    return ResourceRef(ResourceType.GROUP, group_id)


def server_ref(server_id: str) -> ResourceRef:
    return ResourceRef(ResourceType.SERVER, server_id)


def probe_ref(probe_id: str) -> ResourceRef:
    return ResourceRef(ResourceType.PROBE, probe_id)


def notification_config_ref(config_id: str) -> ResourceRef:
    return ResourceRef(ResourceType.NOTIFICATION_CONFIG, config_id)
