"""HTTP routes for user management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from iam.application.services import MembershipService, UserService
from iam.dependencies.authentication import CurrentActor
from iam.dependencies.group import get_membership_service
from iam.dependencies.user import get_user_service
from iam.domain.value_objects import UserId
from iam.presentation.users.models import (
    CreateUserRequest,
    UpdateUserRequest,
    UserGroupResponse,
    UserResponse,
)
from shared_kernel.exceptions import ResourceNotFoundError

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


def _user_id(value: str) -> UserId:
    try:
        return UserId.from_string(value)
    except ValueError as e:
        raise ResourceNotFoundError("user", value) from e


@router.get("", summary="List users (super admin only)")
async def list_users(
    actor: CurrentActor,
    service: Annotated[UserService, Depends(get_user_service)],
) -> list[UserResponse]:
    users = await service.list_users(actor)
    return [UserResponse.from_domain(user) for user in users]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    actor: CurrentActor,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Create a user (super admin only). Returns 409 on a duplicate email."""
    user = await service.create_user(
        actor, name=request.name, email=request.email, role=request.role
    )
    return UserResponse.from_domain(user)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    actor: CurrentActor,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    user = await service.get_user(actor, _user_id(user_id))
    return UserResponse.from_domain(user)


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    actor: CurrentActor,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    user = await service.update_user(
        actor,
        _user_id(user_id),
        name=request.name,
        email=request.email,
        role=request.role,
    )
    return UserResponse.from_domain(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    actor: CurrentActor,
    service: Annotated[UserService, Depends(get_user_service)],
) -> Response:
    await service.delete_user(actor, _user_id(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/groups")
async def list_user_groups(
    user_id: str,
    actor: CurrentActor,
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> list[UserGroupResponse]:
    views = await service.list_groups_for(actor, _user_id(user_id))
    return [UserGroupResponse.from_view(view) for view in views]
