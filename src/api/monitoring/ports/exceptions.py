"""Exceptions for the monitoring context."""

from shared_kernel.exceptions import ResourceNotFoundError


class UnknownWebhookTokenError(ResourceNotFoundError):
    """Raised when a payload is delivered to a token no probe owns."""

    def __init__(self, token: str) -> None:
        super().__init__("webhook probe", token)
