"""Pydantic models for self-registration."""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Profile for the identity in the bearer token.

    Both fields fall back to the token's claims when omitted.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
