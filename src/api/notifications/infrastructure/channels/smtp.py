"""EMAIL channel adapter over SMTP.

smtplib is blocking; each delivery runs in a worker thread so the event
loop stays responsive and the dispatcher's timeout can fire.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any

from infrastructure.settings import SmtpSettings
from notifications.domain.rendering import RenderedEmail
from notifications.infrastructure.observability import (
    DefaultNotificationsInfrastructureProbe,
    NotificationsInfrastructureProbe,
)
from notifications.ports.exceptions import ChannelDeliveryError


class SmtpEmailSender:
    """Sends multipart (text and HTML) messages through the configured relay.

    ``timeout_seconds`` bounds every socket operation of the session; the
    worker thread cannot be cancelled from the event loop.
    """

    def __init__(
        self,
        settings: SmtpSettings,
        timeout_seconds: float = 15.0,
        probe: NotificationsInfrastructureProbe | None = None,
    ) -> None:
        self._settings = settings
        self._timeout = timeout_seconds
        self._probe = probe or DefaultNotificationsInfrastructureProbe()

    async def send(
        self, recipients: tuple[str, ...], message: RenderedEmail
    ) -> dict[str, Any]:
        if not self._settings.is_complete:
            raise ChannelDeliveryError("incomplete SMTP configuration")
        if not recipients:
            raise ChannelDeliveryError("no recipients configured")

        email = self._build(recipients, message)
        try:
            refused = await asyncio.to_thread(self._deliver, email, list(recipients))
        except (smtplib.SMTPException, OSError) as e:
            self._probe.delivery_error("EMAIL", str(e))
            raise ChannelDeliveryError(f"SMTP delivery failed: {e}") from e

        accepted = [r for r in recipients if r not in refused]
        self._probe.email_delivered(len(recipients), sorted(refused))
        return {"accepted": accepted, "refused": sorted(refused)}

    def _build(self, recipients: tuple[str, ...], message: RenderedEmail) -> EmailMessage:
        email = EmailMessage()
        email["From"] = formataddr(
            (self._settings.from_name, self._settings.from_address)
        )
        email["To"] = ", ".join(recipients)
        email["Subject"] = message.subject
        email.set_content(message.text)
        email.add_alternative(message.html, subtype="html")
        return email

    def _deliver(self, email: EmailMessage, recipients: list[str]) -> dict[str, Any]:
        settings = self._settings
        password = settings.password.get_secret_value() if settings.password else ""

        if settings.use_implicit_tls:
            client: smtplib.SMTP = smtplib.SMTP_SSL(
                settings.host, settings.port, timeout=self._timeout
            )
        else:
            client = smtplib.SMTP(settings.host, settings.port, timeout=self._timeout)
        with client:
            if not settings.use_implicit_tls:
                client.starttls()
            client.login(settings.username, password)
            return client.send_message(email, to_addrs=recipients)
