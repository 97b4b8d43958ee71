"""Channel-specific rendering of notification events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Any
from zoneinfo import ZoneInfo

from notifications.domain.value_objects import NotificationEvent, NotificationLevel

LEVEL_COLOURS: dict[NotificationLevel, str] = {
    NotificationLevel.ERROR: "#f56565",
    NotificationLevel.WARNING: "#ed8936",
    NotificationLevel.INFO: "#4299e1",
}

_FOOTER = "This notification was sent automatically by the server monitoring system."


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def format_timestamp(
    timestamp: datetime, timezone: str, timestamp_format: str
) -> str:
    """Render a timestamp in the configured zone."""
    return timestamp.astimezone(ZoneInfo(timezone)).strftime(timestamp_format)


def render_email(
    event: NotificationEvent,
    timezone: str = "Europe/Paris",
    timestamp_format: str = "%d/%m/%Y %H:%M:%S",
) -> RenderedEmail:
    """Render an event as an HTML email with a plain-text alternative."""
    when = format_timestamp(event.timestamp, timezone, timestamp_format)
    colour = LEVEL_COLOURS[event.level]

    fields = [f"<p><strong>Server:</strong> {escape(event.server_name)}</p>"]
    if event.probe_name:
        fields.append(f"<p><strong>Probe:</strong> {escape(event.probe_name)}</p>")
    fields.append(f"<p><strong>Date:</strong> {when}</p>")

    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<div style="background-color: {colour}; color: white; padding: 20px; '
        'text-align: center;">'
        f'<h1 style="margin: 0;">{escape(event.title)}</h1>'
        "</div>"
        '<div style="padding: 20px; border: 1px solid #e2e8f0; border-top: none;">'
        f"<p>{escape(event.message)}</p>"
        f"{''.join(fields)}"
        f'<p style="margin-top: 20px; font-size: 12px; color: #718096;">{_FOOTER}</p>'
        "</div>"
        "</div>"
    )
    text = (
        f"{event.title}\n\n{event.message}\n\n"
        f"Server: {event.server_name}\n"
        f"Probe: {event.probe_name or 'N/A'}\n"
        f"Date: {when}\n\n{_FOOTER}"
    )
    return RenderedEmail(
        subject=f"[{event.level.value}] {event.title}", html=html, text=text
    )


def render_webhook_payload(
    template: dict[str, Any], event: NotificationEvent
) -> dict[str, Any]:
    """Merge the stored template with the event. Event fields win."""
    return {**template, **event.as_payload()}
