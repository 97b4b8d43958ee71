"""Probes for the IAM application services."""

from iam.application.observability.group_service_probe import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from iam.application.observability.membership_service_probe import (
    DefaultMembershipServiceProbe,
    MembershipServiceProbe,
)
from iam.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "GroupServiceProbe",
    "DefaultGroupServiceProbe",
    "MembershipServiceProbe",
    "DefaultMembershipServiceProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]
