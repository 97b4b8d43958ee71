"""Unit tests for ProbeAlertHandler."""

from unittest.mock import create_autospec

import pytest

from notifications.application.observability import DispatchProbe
from notifications.application.services import NotificationDispatcher, ProbeAlertHandler
from notifications.domain.value_objects import NotificationLevel
from notifications.ports.repositories import INotificationStore
from shared_kernel.exceptions import InvariantViolationError, ResourceNotFoundError


@pytest.fixture
def payload() -> dict:
    return {
        "probe_id": "p1",
        "probe_name": "homepage",
        "server_id": "s1",
        "server_name": "web-1",
        "server_group_ids": ["g1", "g2"],
        "old_status": "OK",
        "new_status": "ERROR",
        "message": "connection refused",
        "occurred_at": "2026-10-16T12:00:00+00:00",
    }


@pytest.fixture
def mock_dispatcher():
    return create_autospec(NotificationDispatcher, instance=True)


@pytest.fixture
def mock_store():
    return create_autospec(INotificationStore, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(DispatchProbe, instance=True)


@pytest.fixture
def handler(mock_dispatcher, mock_store, mock_probe):
    return ProbeAlertHandler(
        dispatcher=mock_dispatcher, store=mock_store, probe=mock_probe
    )


def test_handles_probe_status_changes(handler):
    assert handler.supported_event_types() == frozenset({"ProbeStatusChanged"})


@pytest.mark.asyncio
async def test_fans_out_to_every_config_of_server_groups(
    handler, payload, mock_store, mock_dispatcher, mock_probe
):
    mock_store.config_ids_for_groups.return_value = ["c1", "c2"]

    await handler.handle("ProbeStatusChanged", payload)

    mock_store.config_ids_for_groups.assert_awaited_once_with(frozenset({"g1", "g2"}))
    sent_to = sorted(call.args[0] for call in mock_dispatcher.send.await_args_list)
    assert sent_to == ["c1", "c2"]
    event = mock_dispatcher.send.await_args.args[1]
    assert event.level == NotificationLevel.ERROR
    assert event.title == "Probe homepage on web-1 is ERROR"
    assert event.details == {"old_status": "OK", "new_status": "ERROR"}
    mock_probe.alert_fanned_out.assert_called_once_with("p1", "ERROR", 2)


@pytest.mark.asyncio
async def test_vanished_config_does_not_stop_others(
    handler, payload, mock_store, mock_dispatcher, mock_probe
):
    mock_store.config_ids_for_groups.return_value = ["gone", "c2"]

    async def send(config_id, event):
        if config_id == "gone":
            raise ResourceNotFoundError("notification_config", config_id)

    mock_dispatcher.send.side_effect = send

    await handler.handle("ProbeStatusChanged", payload)

    assert mock_dispatcher.send.await_count == 2
    mock_probe.config_vanished.assert_called_once_with("gone")


@pytest.mark.asyncio
async def test_server_without_groups_sends_nothing(
    handler, payload, mock_store, mock_dispatcher
):
    payload["server_group_ids"] = []

    await handler.handle("ProbeStatusChanged", payload)

    mock_store.config_ids_for_groups.assert_not_called()
    mock_dispatcher.send.assert_not_called()


@pytest.mark.asyncio
async def test_corrupt_config_does_not_fail_the_event(
    handler, payload, mock_store, mock_dispatcher, mock_probe
):
    mock_store.config_ids_for_groups.return_value = ["corrupt", "c2"]

    async def send(config_id, event):
        if config_id == "corrupt":
            raise InvariantViolationError("no sub-row")

    mock_dispatcher.send.side_effect = send

    await handler.handle("ProbeStatusChanged", payload)

    assert mock_dispatcher.send.await_count == 2
    mock_probe.alert_fanned_out.assert_called_once_with("p1", "ERROR", 2)


@pytest.mark.asyncio
async def test_unexpected_dispatch_error_is_logged_and_skipped(
    handler, payload, mock_store, mock_dispatcher, mock_probe
):
    mock_store.config_ids_for_groups.return_value = ["broken", "c2"]

    async def send(config_id, event):
        if config_id == "broken":
            raise RuntimeError("history table unavailable")

    mock_dispatcher.send.side_effect = send

    await handler.handle("ProbeStatusChanged", payload)

    mock_probe.dispatch_aborted.assert_called_once_with(
        "broken", "history table unavailable"
    )


@pytest.mark.asyncio
async def test_healthy_config_is_sent_once_despite_a_corrupt_sibling(
    handler, payload, mock_store, mock_dispatcher
):
    mock_store.config_ids_for_groups.return_value = ["corrupt", "c2"]

    async def send(config_id, event):
        if config_id == "corrupt":
            raise InvariantViolationError("no sub-row")

    mock_dispatcher.send.side_effect = send

    # The outbox worker calls the handler again only while it raises.
    for _ in range(5):
        try:
            await handler.handle("ProbeStatusChanged", payload)
        except Exception:
            continue
        break

    healthy = [c for c in mock_dispatcher.send.await_args_list if c.args[0] == "c2"]
    assert len(healthy) == 1
