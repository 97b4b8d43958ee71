"""Channel adapter protocols.

The dispatcher depends only on these narrow send contracts; transports
live in the infrastructure layer.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from notifications.domain.rendering import RenderedEmail


@runtime_checkable
class EmailSender(Protocol):
    async def send(
        self, recipients: tuple[str, ...], message: RenderedEmail
    ) -> dict[str, Any]:
        """Deliver an email.

        Returns:
            A transport summary, e.g. accepted and refused recipients

        Raises:
            ChannelDeliveryError: If the message could not be delivered
        """
        ...


@runtime_checkable
class WebhookSender(Protocol):
    async def send(
        self, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> Any:
        """POST a JSON payload.

        Returns:
            The decoded response body, or its text when not JSON

        Raises:
            ChannelDeliveryError: On transport failure or a non-2xx response
        """
        ...
