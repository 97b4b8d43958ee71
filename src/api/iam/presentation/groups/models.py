"""Pydantic models for group API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.application.value_objects import MemberDetails, MembershipChanges
from iam.domain.aggregates import Group
from iam.domain.value_objects import GroupRole


class CreateGroupRequest(BaseModel):
    """Request model for creating a group."""

    name: str = Field(..., description="Group name", min_length=1, max_length=255)
    description: str = Field(default="", description="Free-form description")


class UpdateGroupRequest(BaseModel):
    """Request model for updating group metadata. Omitted fields are kept."""

    name: str | None = Field(
        default=None, min_length=1, max_length=255, description="Group name"
    )
    description: str | None = Field(default=None, description="Description")


class NewMember(BaseModel):
    user_id: str = Field(..., description="User ID to add", min_length=1)
    role: GroupRole = Field(default=GroupRole.MEMBER, description="Role to assign")


class AddGroupMembersRequest(BaseModel):
    """Request model for adding one or more members to a group."""

    members: list[NewMember] = Field(..., min_length=1)


class UpdateGroupMemberRoleRequest(BaseModel):
    """Request model for updating a group member's role."""

    role: GroupRole = Field(..., description="New role to assign")


class GroupMemberResponse(BaseModel):
    """Response model for group member."""

    user_id: str = Field(..., description="User ID")
    role: GroupRole = Field(..., description="Member role (ADMIN or MEMBER)")


class GroupMemberDetailsResponse(GroupMemberResponse):
    name: str
    email: str

    @classmethod
    def from_details(cls, details: MemberDetails) -> GroupMemberDetailsResponse:
        return cls(
            user_id=details.user_id,
            role=details.role,
            name=details.name,
            email=details.email,
        )


class AddGroupMembersResponse(BaseModel):
    """Users that became members, and users that already were."""

    created: list[str]
    already_member: list[str]

    @classmethod
    def from_changes(cls, changes: MembershipChanges) -> AddGroupMembersResponse:
        return cls(created=changes.created, already_member=changes.already_member)


class GroupResponse(BaseModel):
    """Response model for group."""

    id: str = Field(..., description="Group ID (ULID format)")
    name: str = Field(..., description="Group name")
    description: str = Field(..., description="Group description")
    members: list[GroupMemberResponse] = Field(
        default_factory=list, description="Group members with roles"
    )

    @classmethod
    def from_domain(cls, group: Group) -> GroupResponse:
        """Convert domain Group aggregate to API response."""
        return cls(
            id=group.id.value,
            name=group.name,
            description=group.description,
            members=[
                GroupMemberResponse(
                    user_id=member.user_id.value,
                    role=member.role,
                )
                for member in group.members
            ],
        )
