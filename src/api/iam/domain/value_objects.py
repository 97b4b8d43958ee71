"""Identifiers and membership descriptors of the IAM context.

The role enums live in the shared kernel because the authorization
engine reasons about them; they are re-exported here for convenience.
"""

from __future__ import annotations

from dataclasses import dataclass

from ulid import ULID

from shared_kernel.authorization.types import GlobalRole, GroupRole

__all__ = [
    "GlobalRole",
    "GroupId",
    "GroupMember",
    "GroupRole",
    "UserId",
]

MAX_SUBJECT_LENGTH = 255


@dataclass(frozen=True)
class GroupId:
    """ULID of a group; malformed ids are rejected at the edge."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> GroupId:
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> GroupId:
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"{value!r} is not a group id") from e
        return cls(value=value)


@dataclass(frozen=True)
class UserId:
    """Id of a user.

    Self-registered users keep the identity provider's ``sub`` claim, so
    this is not necessarily a ULID. Users created by a super admin get
    one.
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        if not 0 < len(value) <= MAX_SUBJECT_LENGTH:
            raise ValueError(f"{value!r} is not a user id")
        return cls(value=value)


@dataclass(frozen=True)
class GroupMember:
    user_id: UserId
    role: GroupRole

    def is_admin(self) -> bool:
        return self.role is GroupRole.ADMIN
