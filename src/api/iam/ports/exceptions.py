"""Domain exceptions for IAM bounded context.

Each exception derives from the shared error taxonomy so the HTTP layer
maps it to a status code without IAM-specific wiring.
"""

from shared_kernel.exceptions import (
    AccessDeniedError,
    ConflictError,
    ResourceNotFoundError,
)


class LastAdminError(ConflictError):
    """Raised when a change would leave a group without any ADMIN.

    Applies to every caller, SUPER_ADMIN included: a second admin must be
    promoted before the last one is demoted or removed.
    """

    def __init__(self, group_id: str) -> None:
        self.group_id = group_id
        super().__init__(
            f"Cannot remove or demote the last administrator of group {group_id}"
        )


class NoNewMembersError(ConflictError):
    """Raised when an add-members request contains no user who is not already a member."""

    def __init__(self, already_member: list[str]) -> None:
        self.already_member = already_member
        super().__init__("No new members: every user is already a member")


class GroupNotEmptyError(ConflictError):
    """Raised when deleting a group that still has attached resources."""

    def __init__(self, group_id: str, resource_type: str) -> None:
        self.group_id = group_id
        self.resource_type = resource_type
        super().__init__(
            f"Group {group_id} still has attached {resource_type} resources"
        )


class DuplicateEmailError(ConflictError):
    """Raised when an email address is already used by another user."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email {email} is already in use")


class UserAlreadyRegisteredError(ConflictError):
    """Raised when an identity registers a second time."""


class SelfDeletionError(ConflictError):
    """Raised when a user tries to delete their own account."""


class GroupCreationForbiddenError(AccessDeniedError):
    """Raised when a user without the ADMIN or SUPER_ADMIN global role creates a group."""


class MembershipNotFoundError(ResourceNotFoundError):
    """Raised when the user is not a member of the group."""

    def __init__(self, group_id: str, user_id: str) -> None:
        super().__init__("membership", f"{group_id}/{user_id}")
