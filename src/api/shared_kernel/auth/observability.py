"""Domain probe for bearer token validation."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class JWTValidatorProbe(Protocol):
    """Domain probe for token validation."""

    def token_validated(self, subject: str) -> None:
        """Record that a token was successfully validated."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        ...

    def signing_keys_fetched(self, key_count: int) -> None:
        """Record that signing keys were fetched from the identity provider."""
        ...

    def signing_keys_fetch_failed(self, error: str) -> None:
        """Record that fetching signing keys failed."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe: ...


class DefaultJWTValidatorProbe(StructlogProbe):
    def token_validated(self, subject: str) -> None:
        self._log.debug(
            "token_validated", subject=subject
        )

    def token_validation_failed(self, reason: str) -> None:
        self._log.warning(
            "token_validation_failed", reason=reason
        )

    def signing_keys_fetched(self, key_count: int) -> None:
        self._log.info(
            "signing_keys_fetched", key_count=key_count
        )

    def signing_keys_fetch_failed(self, error: str) -> None:
        self._log.error(
            "signing_keys_fetch_failed", error=error
        )
