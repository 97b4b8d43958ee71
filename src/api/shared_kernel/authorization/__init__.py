"""Authorization primitives for group-scoped access control.

This module provides shared authorization types and abstractions used
across bounded contexts.
"""

from shared_kernel.authorization.types import (
    Actor,
    GlobalRole,
    GroupRole,
    ResourceRef,
    ResourceType,
)

__all__ = [
    "Actor",
    "GlobalRole",
    "GroupRole",
    "ResourceRef",
    "ResourceType",
]
