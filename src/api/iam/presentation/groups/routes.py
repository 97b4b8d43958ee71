"""HTTP routes for group management and group membership."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from iam.application.services import GroupService, MembershipService
from iam.dependencies.authentication import CurrentActor
from iam.dependencies.group import get_group_service, get_membership_service
from iam.domain.value_objects import GroupId, UserId
from iam.presentation.groups.models import (
    AddGroupMembersRequest,
    AddGroupMembersResponse,
    CreateGroupRequest,
    GroupMemberDetailsResponse,
    GroupResponse,
    UpdateGroupMemberRoleRequest,
    UpdateGroupRequest,
)
from shared_kernel.exceptions import ResourceNotFoundError

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)


def _group_id(value: str) -> GroupId:
    try:
        return GroupId.from_string(value)
    except ValueError as e:
        raise ResourceNotFoundError("group", value) from e


def _user_id(value: str) -> UserId:
    try:
        return UserId.from_string(value)
    except ValueError as e:
        raise ResourceNotFoundError("user", value) from e


@router.get(
    "",
    summary="List groups",
    description="List the groups the caller is a member of (all groups for super admins)",
)
async def list_groups(
    actor: CurrentActor,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> list[GroupResponse]:
    groups = await service.list_groups(actor)
    return [GroupResponse.from_domain(group) for group in groups]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateGroupRequest,
    actor: CurrentActor,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Create a new group with the caller as its first admin.

    Requires the ADMIN or SUPER_ADMIN global role.
    """
    group = await service.create_group(
        actor, name=request.name, description=request.description
    )
    return GroupResponse.from_domain(group)


@router.get("/{group_id}")
async def get_group(
    group_id: str,
    actor: CurrentActor,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    group = await service.get_group(actor, _group_id(group_id))
    return GroupResponse.from_domain(group)


@router.patch("/{group_id}")
async def update_group(
    group_id: str,
    request: UpdateGroupRequest,
    actor: CurrentActor,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    group = await service.update_group(
        actor,
        _group_id(group_id),
        name=request.name,
        description=request.description,
    )
    return GroupResponse.from_domain(group)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    actor: CurrentActor,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> Response:
    """Delete a group (super admin only).

    Fails with 409 while servers, probes or notification configurations
    are still attached to the group.
    """
    await service.delete_group(actor, _group_id(group_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/members")
async def list_members(
    group_id: str,
    actor: CurrentActor,
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> list[GroupMemberDetailsResponse]:
    members = await service.list_members(actor, _group_id(group_id))
    return [GroupMemberDetailsResponse.from_details(m) for m in members]


@router.post("/{group_id}/members", status_code=status.HTTP_201_CREATED)
async def add_members(
    group_id: str,
    request: AddGroupMembersRequest,
    actor: CurrentActor,
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> AddGroupMembersResponse:
    """Add members to a group.

    Users who already belong to the group are reported in
    ``already_member``. Returns 409 when nobody new was added.
    """
    changes = await service.add_members(
        actor,
        _group_id(group_id),
        [(_user_id(m.user_id), m.role) for m in request.members],
    )
    return AddGroupMembersResponse.from_changes(changes)


@router.patch(
    "/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def update_member_role(
    group_id: str,
    user_id: str,
    request: UpdateGroupMemberRoleRequest,
    actor: CurrentActor,
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> Response:
    await service.change_role(
        actor, _group_id(group_id), _user_id(user_id), request.role
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_member(
    group_id: str,
    user_id: str,
    actor: CurrentActor,
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> Response:
    await service.remove_member(actor, _group_id(group_id), _user_id(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
