"""Error taxonomy shared by every bounded context.

Each context derives its own, more specific exceptions from these bases
(see ``<context>/ports/exceptions.py``). The HTTP layer maps the bases to
status codes in a single place, so new subclasses need no extra wiring.
"""

from __future__ import annotations


class AccessDeniedError(PermissionError):
    """Raised when an authenticated actor lacks rights on an existing resource."""


class ResourceNotFoundError(LookupError):
    """Raised when the referenced resource does not exist.

    Only raised when the resource truly does not exist; a resource that
    exists but is off-limits raises AccessDeniedError instead.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} {resource_id} not found")


class ConflictError(Exception):
    """Raised when a request conflicts with the current state.

    Covers last-admin protection, duplicate unique keys and deletion of
    a resource that still has dependents.
    """


class InvalidInputError(ValueError):
    """Raised when input is malformed.

    Attributes:
        errors: Mapping of field name to a human-readable message.
    """

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        self.errors = errors or {}
        super().__init__(message)


class InvariantViolationError(RuntimeError):
    """Raised when persisted state breaks a structural invariant.

    Indicates data corruption (for example a config row whose declared
    type has no matching sub-record), never a request-level mistake.
    """
