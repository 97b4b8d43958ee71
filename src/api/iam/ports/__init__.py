"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories without specifying
implementation details, keeping the application layer independent of
infrastructure.
"""

from iam.ports.repositories import IGroupRepository, IUserRepository

__all__ = [
    "IGroupRepository",
    "IUserRepository",
]
