"""Unit tests for bearer token validation with a shared secret."""

from datetime import UTC, datetime, timedelta
from unittest.mock import create_autospec

import pytest
from jose import jwt

from shared_kernel.auth import InvalidTokenError, JWTValidator, JWTValidatorProbe

SECRET = "test-signing-secret"


@pytest.fixture
def probe():
    return create_autospec(JWTValidatorProbe, instance=True)


def _token(secret: str = SECRET, **claims) -> str:
    claims.setdefault("exp", datetime.now(UTC) + timedelta(minutes=5))
    return jwt.encode(claims, secret, algorithm="HS256")


def test_requires_secret_or_issuer(probe):
    with pytest.raises(ValueError):
        JWTValidator(probe=probe)


@pytest.mark.asyncio
async def test_valid_token_yields_claims(probe):
    validator = JWTValidator(probe=probe, secret=SECRET)

    claims = await validator.validate_token(
        _token(sub="kc-123", email="ada@example.com", preferred_username="ada")
    )

    assert claims.sub == "kc-123"
    assert claims.email == "ada@example.com"
    assert claims.name == "ada"
    probe.token_validated.assert_called_once_with(subject="kc-123")


@pytest.mark.asyncio
async def test_custom_user_id_claim(probe):
    validator = JWTValidator(probe=probe, secret=SECRET, user_id_claim="uid")

    claims = await validator.validate_token(_token(sub="ignored", uid="u-9"))

    assert claims.sub == "u-9"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(probe):
    validator = JWTValidator(probe=probe, secret=SECRET)
    token = _token(sub="kc-1", exp=datetime.now(UTC) - timedelta(minutes=1))

    with pytest.raises(InvalidTokenError, match="expired"):
        await validator.validate_token(token)
    probe.token_validation_failed.assert_called_once_with(reason="Token expired")


@pytest.mark.asyncio
async def test_wrong_signature_is_rejected(probe):
    validator = JWTValidator(probe=probe, secret=SECRET)

    with pytest.raises(InvalidTokenError):
        await validator.validate_token(_token(secret="another-secret", sub="kc-1"))


@pytest.mark.asyncio
async def test_wrong_audience_is_rejected(probe):
    validator = JWTValidator(probe=probe, secret=SECRET, audience="servmon")

    with pytest.raises(InvalidTokenError, match="claims"):
        await validator.validate_token(_token(sub="kc-1", aud="someone-else"))


@pytest.mark.asyncio
async def test_missing_subject_is_rejected(probe):
    validator = JWTValidator(probe=probe, secret=SECRET)

    with pytest.raises(InvalidTokenError, match="Missing required claim: sub"):
        await validator.validate_token(_token(email="ada@example.com"))


@pytest.mark.asyncio
async def test_garbage_is_rejected_as_malformed(probe):
    validator = JWTValidator(probe=probe, secret=SECRET)

    with pytest.raises(InvalidTokenError, match="format"):
        await validator.validate_token("not-a-jwt")
