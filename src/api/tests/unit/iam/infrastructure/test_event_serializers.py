"""Tests for outbox payloads of IAM and monitoring events."""

import json
from datetime import UTC, datetime

import pytest

from iam.domain.events import GroupDeleted, MemberSnapshot
from iam.infrastructure.outbox.serializer import IAMEventSerializer
from monitoring.domain.events import ProbeStatusChanged
from monitoring.infrastructure.outbox.serializer import MonitoringEventSerializer

WHEN = datetime(2026, 3, 1, 8, 0, tzinfo=UTC)


def test_group_deleted_payload_flattens_member_snapshots():
    event = GroupDeleted(
        group_id="g1",
        members=(MemberSnapshot(user_id="u1", role="ADMIN"),),
        occurred_at=WHEN,
    )

    payload = IAMEventSerializer().serialize(event)

    assert payload == {
        "group_id": "g1",
        "members": [{"user_id": "u1", "role": "ADMIN"}],
        "occurred_at": "2026-03-01T08:00:00+00:00",
    }
    json.dumps(payload)


def test_probe_status_changed_payload_keeps_alert_handler_keys():
    event = ProbeStatusChanged(
        probe_id="p1",
        probe_name="api",
        server_id="s1",
        server_name="web-1",
        server_group_ids=("g1", "g2"),
        old_status="OK",
        new_status="ERROR",
        message="connection refused",
        occurred_at=WHEN,
    )

    payload = MonitoringEventSerializer().serialize(event)

    assert payload["server_group_ids"] == ["g1", "g2"]
    assert payload["new_status"] == "ERROR"
    assert datetime.fromisoformat(payload["occurred_at"]) == WHEN


def test_serializers_reject_other_contexts_events():
    event = GroupDeleted(group_id="g1", members=(), occurred_at=WHEN)

    with pytest.raises(ValueError, match="not a monitoring event"):
        MonitoringEventSerializer().serialize(event)


def test_supported_event_types_follow_the_event_union():
    assert MonitoringEventSerializer().supported_event_types() == frozenset(
        {"ServerDeleted", "ProbeStatusChanged"}
    )
    assert "UserRegistered" in IAMEventSerializer().supported_event_types()
