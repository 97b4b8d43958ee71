"""Probes for IAM persistence."""

from iam.infrastructure.observability.repository_probe import (
    DefaultGroupRepositoryProbe,
    DefaultUserRepositoryProbe,
    GroupRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "GroupRepositoryProbe",
    "DefaultGroupRepositoryProbe",
    "UserRepositoryProbe",
    "DefaultUserRepositoryProbe",
]
