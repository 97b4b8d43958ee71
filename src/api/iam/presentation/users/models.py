"""Pydantic models for user API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from iam.application.value_objects import GroupMembershipView
from iam.domain.aggregates import User
from iam.domain.value_objects import GlobalRole, GroupRole


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role: GlobalRole = GlobalRole.USER


class UpdateUserRequest(BaseModel):
    """Partial update. ``role`` is ignored when users update themselves."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: GlobalRole | None = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: GlobalRole
    last_login_at: datetime | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        return cls(
            id=user.id.value,
            name=user.name,
            email=user.email,
            role=user.role,
            last_login_at=user.last_login_at,
        )


class UserGroupResponse(BaseModel):
    """A group the user belongs to, with the user's role in it."""

    group_id: str
    name: str
    role: GroupRole

    @classmethod
    def from_view(cls, view: GroupMembershipView) -> UserGroupResponse:
        return cls(group_id=view.group_id, name=view.name, role=view.role)
