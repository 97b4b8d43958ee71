"""WEBHOOK channel adapter over HTTP."""

from __future__ import annotations

from typing import Any

import httpx

from notifications.infrastructure.observability import (
    DefaultNotificationsInfrastructureProbe,
    NotificationsInfrastructureProbe,
)
from notifications.ports.exceptions import ChannelDeliveryError


class HttpWebhookSender:
    """POSTs JSON payloads; any non-2xx response is a failed delivery.

    The dispatcher bounds each call with its own timeout, so the client
    carries no timeout of its own beyond httpx's default.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        probe: NotificationsInfrastructureProbe | None = None,
    ) -> None:
        self._client = client
        self._probe = probe or DefaultNotificationsInfrastructureProbe()

    async def send(
        self, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> Any:
        request_headers = {"Content-Type": "application/json", **headers}
        try:
            if self._client is not None:
                response = await self._client.post(
                    url, json=payload, headers=request_headers
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        url, json=payload, headers=request_headers
                    )
        except httpx.HTTPError as e:
            self._probe.delivery_error("WEBHOOK", str(e))
            raise ChannelDeliveryError(f"Webhook request failed: {e}") from e

        if not response.is_success:
            raise ChannelDeliveryError(
                f"Webhook returned {response.status_code} {response.reason_phrase}"
            )

        self._probe.webhook_delivered(url, response.status_code)
        try:
            return response.json()
        except ValueError:
            return response.text or None
