"""Application services for IAM bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the IAM context.
"""

from iam.application.services.authorization_service import AuthorizationService
from iam.application.services.group_service import GroupService
from iam.application.services.membership_service import MembershipService
from iam.application.services.user_service import UserService

__all__ = [
    "AuthorizationService",
    "GroupService",
    "MembershipService",
    "UserService",
]
