"""Bearer token validation.

Tokens come from an external identity provider. They are verified
either with a shared HMAC secret (single-service deployments and tests)
or with the keys the provider publishes through OIDC discovery.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, NoReturn

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

_ASYMMETRIC_ALGORITHMS = ["RS256", "ES256"]


@dataclass(frozen=True)
class TokenClaims:
    sub: str
    email: str | None = None
    name: str | None = None


class InvalidTokenError(Exception):
    """The bearer token cannot be trusted."""


class _JwksCache:
    """Signing keys of one issuer, refetched once ``ttl`` has elapsed."""

    def __init__(self, issuer_url: str, ttl: timedelta, probe: JWTValidatorProbe):
        self._discovery_url = f"{issuer_url}/.well-known/openid-configuration"
        self._ttl = ttl
        self._probe = probe
        self._keys: dict[str, Any] | None = None
        self._expires_at = datetime.min.replace(tzinfo=UTC)
        self._lock = asyncio.Lock()

    def _fresh(self) -> bool:
        return self._keys is not None and datetime.now(UTC) < self._expires_at

    async def get(self) -> dict[str, Any]:
        if not self._fresh():
            async with self._lock:
                if not self._fresh():
                    self._keys = await self._fetch()
                    self._expires_at = datetime.now(UTC) + self._ttl
        assert self._keys is not None
        return self._keys

    async def _fetch(self) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient() as client:
                discovery = await client.get(self._discovery_url)
                discovery.raise_for_status()
                jwks_uri = discovery.json().get("jwks_uri")
                if not jwks_uri:
                    raise InvalidTokenError("Identity provider publishes no jwks_uri")
                response = await client.get(jwks_uri)
                response.raise_for_status()
        except httpx.HTTPError as e:
            self._probe.signing_keys_fetch_failed(error=str(e))
            raise InvalidTokenError(f"Failed to fetch signing keys: {e}") from e

        keys = response.json()
        self._probe.signing_keys_fetched(key_count=len(keys.get("keys", [])))
        return keys


class JWTValidator:
    """Checks signature, expiry and, when configured, issuer and audience.

    The caller's id is read from ``user_id_claim`` (``sub`` by default).
    """

    def __init__(
        self,
        probe: JWTValidatorProbe,
        secret: str | None = None,
        algorithm: str = "HS256",
        issuer_url: str | None = None,
        audience: str | None = None,
        user_id_claim: str = "sub",
        jwks_cache_ttl: timedelta = timedelta(hours=12),
    ):
        if not secret and not issuer_url:
            raise ValueError("Either a shared secret or an issuer URL is required")

        self._probe = probe
        self._secret = secret
        self._algorithm = algorithm
        self._issuer_url = issuer_url.rstrip("/") if issuer_url else None
        self._audience = audience
        self._user_id_claim = user_id_claim
        self._jwks = (
            _JwksCache(self._issuer_url, jwks_cache_ttl, probe)
            if self._issuer_url and not secret
            else None
        )

    async def validate_token(self, token: str) -> TokenClaims:
        """Return the identity claims of a valid token.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or fails
                signature, issuer or audience verification
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            self._reject(f"Malformed token: {e}", f"Invalid token format: {e}", e)

        if self._jwks is None:
            key: Any = self._secret
            algorithms = [self._algorithm]
        else:
            key = await self._jwks.get()
            algorithms = _ASYMMETRIC_ALGORITHMS

        try:
            claims = jwt.decode(
                token=token,
                key=key,
                algorithms=algorithms,
                audience=self._audience,
                issuer=self._issuer_url,
                options={
                    "verify_aud": self._audience is not None,
                    "verify_iss": self._issuer_url is not None,
                },
            )
        except ExpiredSignatureError as e:
            self._reject("Token expired", "Token has expired", e)
        except JWTClaimsError as e:
            self._reject(f"Claims error: {e}", f"Invalid token claims: {e}", e)
        except JWTError as e:
            self._reject(f"JWT error: {e}", f"Invalid token: {e}", e)

        subject = claims.get(self._user_id_claim)
        if not subject:
            self._reject(
                f"Missing {self._user_id_claim} claim",
                f"Missing required claim: {self._user_id_claim}",
            )

        self._probe.token_validated(subject=str(subject))
        return TokenClaims(
            sub=str(subject),
            email=claims.get("email"),
            name=claims.get("name") or claims.get("preferred_username"),
        )

    def _reject(
        self, reason: str, message: str, cause: Exception | None = None
    ) -> NoReturn:
        self._probe.token_validation_failed(reason=reason)
        raise InvalidTokenError(message) from cause
