"""Self-registration of identities issued by the external provider."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from iam.application.services import UserService
from iam.dependencies.authentication import get_token_claims
from iam.dependencies.user import get_user_service
from iam.presentation.registration.models import RegisterRequest
from iam.presentation.users.models import UserResponse
from shared_kernel.auth import TokenClaims
from shared_kernel.exceptions import InvalidInputError

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Register the caller.

    The first user ever registered becomes SUPER_ADMIN and the admin of
    a default group. Returns 409 if the caller or the email is already
    registered.
    """
    name = request.name or claims.name
    email = request.email or claims.email
    errors: dict[str, str] = {}
    if not name:
        errors["name"] = "Field required"
    if not email:
        errors["email"] = "Field required"
    if errors:
        raise InvalidInputError("Invalid registration", errors=errors)

    user = await service.register(subject=claims.sub, name=name, email=email)
    return UserResponse.from_domain(user)
