"""Unit tests for the EMAIL and WEBHOOK channel adapters."""

import json
import smtplib
from unittest.mock import MagicMock

import httpx
import pytest
from pydantic import SecretStr

from infrastructure.settings import SmtpSettings
from notifications.domain.rendering import RenderedEmail
from notifications.infrastructure.channels.smtp import SmtpEmailSender
from notifications.infrastructure.channels.webhook import HttpWebhookSender
from notifications.ports.exceptions import ChannelDeliveryError

MESSAGE = RenderedEmail(subject="[ERROR] down", html="<p>down</p>", text="down")


def _smtp_settings(**overrides) -> SmtpSettings:
    values = dict(
        host="smtp.example.com",
        port=587,
        username="mailer",
        password=SecretStr("secret"),
    )
    values.update(overrides)
    return SmtpSettings(**values)


class TestHttpWebhookSender:
    @pytest.mark.asyncio
    async def test_posts_json_and_returns_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await HttpWebhookSender(client=client).send(
                "https://hooks.test/x", {"X-Token": "t"}, {"level": "ERROR"}
            )

        assert result == {"ok": True}
        assert seen["headers"]["x-token"] == "t"
        assert seen["headers"]["content-type"] == "application/json"
        assert seen["body"] == {"level": "ERROR"}

    @pytest.mark.asyncio
    async def test_non_json_body_returns_text(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))

        async with httpx.AsyncClient(transport=transport) as client:
            result = await HttpWebhookSender(client=client).send(
                "https://hooks.test/x", {}, {}
            )

        assert result is None

    @pytest.mark.asyncio
    async def test_non_success_status_fails(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(ChannelDeliveryError, match="503"):
                await HttpWebhookSender(client=client).send(
                    "https://hooks.test/x", {}, {}
                )

    @pytest.mark.asyncio
    async def test_transport_error_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ChannelDeliveryError, match="connection refused"):
                await HttpWebhookSender(client=client).send(
                    "https://hooks.test/x", {}, {}
                )


class TestSmtpEmailSender:
    @pytest.fixture
    def smtp_class(self, monkeypatch):
        smtp_class = MagicMock()
        smtp_class.return_value.send_message.return_value = {}
        monkeypatch.setattr(smtplib, "SMTP", smtp_class)
        return smtp_class

    @pytest.fixture
    def smtp_client(self, smtp_class):
        return smtp_class.return_value

    @pytest.mark.asyncio
    async def test_incomplete_configuration_fails(self):
        sender = SmtpEmailSender(_smtp_settings(host=None))

        with pytest.raises(ChannelDeliveryError, match="incomplete"):
            await sender.send(("ops@example.com",), MESSAGE)

    @pytest.mark.asyncio
    async def test_sends_multipart_message(self, smtp_client):
        sender = SmtpEmailSender(_smtp_settings())

        result = await sender.send(("ops@example.com",), MESSAGE)

        assert result == {"accepted": ["ops@example.com"], "refused": []}
        smtp_client.starttls.assert_called_once()
        smtp_client.login.assert_called_once_with("mailer", "secret")
        email = smtp_client.send_message.call_args.args[0]
        assert email["Subject"] == "[ERROR] down"
        assert email.is_multipart()

    @pytest.mark.asyncio
    async def test_smtp_error_fails(self, smtp_client):
        smtp_client.login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"bad credentials"
        )
        sender = SmtpEmailSender(_smtp_settings())

        with pytest.raises(ChannelDeliveryError, match="SMTP delivery failed"):
            await sender.send(("ops@example.com",), MESSAGE)

    @pytest.mark.asyncio
    async def test_session_is_opened_with_a_timeout(self, smtp_class, smtp_client):
        sender = SmtpEmailSender(_smtp_settings(), timeout_seconds=2.5)

        await sender.send(("ops@example.com",), MESSAGE)

        smtp_class.assert_called_once_with("smtp.example.com", 587, timeout=2.5)
