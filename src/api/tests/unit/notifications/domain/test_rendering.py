"""Unit tests for channel rendering."""

from datetime import UTC, datetime

from notifications.domain.rendering import (
    format_timestamp,
    render_email,
    render_webhook_payload,
)
from notifications.domain.value_objects import NotificationEvent, NotificationLevel


def _event(**overrides) -> NotificationEvent:
    fields = dict(
        level=NotificationLevel.WARNING,
        title="Probe homepage on web-1 is WARNING",
        message="Expected status 200, got 500",
        server_id="s1",
        server_name="web-1",
        probe_id="p1",
        probe_name="homepage",
        timestamp=datetime(2026, 1, 15, 10, 30, tzinfo=UTC),
    )
    fields.update(overrides)
    return NotificationEvent(**fields)


class TestRenderEmail:
    def test_subject_carries_level(self):
        rendered = render_email(_event())

        assert rendered.subject == "[WARNING] Probe homepage on web-1 is WARNING"

    def test_timestamp_in_configured_zone(self):
        rendered = render_email(_event(), timezone="Europe/Paris")

        assert "15/01/2026 11:30:00" in rendered.text
        assert "15/01/2026 11:30:00" in rendered.html

    def test_html_is_escaped(self):
        rendered = render_email(_event(message="<script>alert(1)</script>"))

        assert "<script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html

    def test_missing_probe_is_not_applicable(self):
        rendered = render_email(_event(probe_id=None, probe_name=None))

        assert "Probe: N/A" in rendered.text
        assert "<strong>Probe:</strong>" not in rendered.html


class TestRenderWebhookPayload:
    def test_event_fields_override_template(self):
        payload = render_webhook_payload(
            {"level": "CUSTOM", "channel": "#ops"}, _event()
        )

        assert payload["level"] == "WARNING"
        assert payload["channel"] == "#ops"
        assert payload["server_name"] == "web-1"
        assert payload["timestamp"] == "2026-01-15T10:30:00+00:00"


def test_format_timestamp_custom_format():
    stamp = datetime(2026, 7, 1, 0, 0, tzinfo=UTC)

    assert format_timestamp(stamp, "UTC", "%Y-%m-%d %H:%M") == "2026-07-01 00:00"
