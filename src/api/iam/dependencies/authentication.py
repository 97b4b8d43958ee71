"""Bearer token authentication for every HTTP route.

Tokens are issued by the external identity provider. The token subject
is the user id; the global role always comes from the users table.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from iam.application.services import UserService
from iam.dependencies.user import get_user_service
from iam.domain.value_objects import UserId
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import (
    DefaultJWTValidatorProbe,
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.authorization.types import Actor

bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHENTICATED_HEADERS = {"WWW-Authenticate": "Bearer"}


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    Uses lru_cache so a single instance (and its JWKS cache) is reused
    across requests.
    """
    settings = get_auth_settings()
    return JWTValidator(
        probe=DefaultJWTValidatorProbe(),
        secret=settings.jwt_secret.get_secret_value() if settings.jwt_secret else None,
        algorithm=settings.algorithm,
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        user_id_claim=settings.user_id_claim,
    )


async def get_token_claims(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> TokenClaims:
    """Validate the bearer token without requiring a registered user.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers=_UNAUTHENTICATED_HEADERS,
        )

    try:
        return await validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {e}",
            headers=_UNAUTHENTICATED_HEADERS,
        ) from e


async def get_current_actor(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Actor:
    """Resolve the authenticated caller to an actor.

    Raises:
        HTTPException: 401 if the token subject is not a registered user
    """
    try:
        user_id = UserId.from_string(claims.sub)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject",
            headers=_UNAUTHENTICATED_HEADERS,
        ) from e

    actor = await user_service.get_actor(user_id)
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User is not registered",
            headers=_UNAUTHENTICATED_HEADERS,
        )
    return actor


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
