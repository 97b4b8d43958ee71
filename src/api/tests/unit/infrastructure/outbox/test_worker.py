"""Unit tests for OutboxWorker entry processing and CompositeEventHandler."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, create_autospec
from uuid import uuid4

import pytest

from infrastructure.outbox.composite import CompositeEventHandler
from infrastructure.outbox.worker import OutboxWorker
from shared_kernel.outbox.observability import OutboxWorkerProbe
from shared_kernel.outbox.value_objects import OutboxEntry


def _entry(event_type: str = "ProbeStatusChanged", retry_count: int = 0) -> OutboxEntry:
    return OutboxEntry(
        id=uuid4(),
        aggregate_type="probe",
        aggregate_id="p1",
        event_type=event_type,
        payload={"probe_id": "p1"},
        retry_count=retry_count,
    )


class RecordingHandler:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._fail = fail

    def supported_event_types(self) -> frozenset[str]:
        return frozenset({"ProbeStatusChanged"})

    async def handle(self, event_type: str, payload: dict[str, Any]) -> None:
        self.calls.append((event_type, payload))
        if self._fail:
            raise RuntimeError("smtp relay down")


@pytest.fixture
def mock_probe():
    return create_autospec(OutboxWorkerProbe, instance=True)


@pytest.fixture
def session():
    return AsyncMock()


def _worker(handler: CompositeEventHandler, probe, max_retries: int = 3) -> OutboxWorker:
    return OutboxWorker(
        session_factory=MagicMock(),
        handler=handler,
        probe=probe,
        max_retries=max_retries,
    )


def _update_values(session) -> dict[str, Any]:
    statement = session.execute.await_args.args[0]
    return statement.compile().params


class TestCompositeEventHandler:
    @pytest.mark.asyncio
    async def test_routes_to_registered_handlers(self, mock_probe):
        composite = CompositeEventHandler(probe=mock_probe)
        handler = RecordingHandler()
        composite.register(handler, context_name="notifications")

        await composite.handle("ProbeStatusChanged", {"x": 1})

        assert handler.calls == [("ProbeStatusChanged", {"x": 1})]
        assert composite.handles("ProbeStatusChanged")
        assert not composite.handles("ServerDeleted")
        mock_probe.handler_registered.assert_called_once_with(
            "notifications", frozenset({"ProbeStatusChanged"})
        )

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self):
        composite = CompositeEventHandler()
        composite.register(RecordingHandler(fail=True))

        with pytest.raises(RuntimeError):
            await composite.handle("ProbeStatusChanged", {})


class TestProcessEntries:
    @pytest.mark.asyncio
    async def test_handled_entry_is_marked_processed(self, mock_probe, session):
        composite = CompositeEventHandler()
        handler = RecordingHandler()
        composite.register(handler)
        entry = _entry()

        await _worker(composite, mock_probe)._process_entries([entry], session)

        assert handler.calls == [("ProbeStatusChanged", {"probe_id": "p1"})]
        assert "processed_at" in _update_values(session)
        mock_probe.event_handled.assert_called_once_with(entry.id, entry.event_type)

    @pytest.mark.asyncio
    async def test_entry_without_handler_is_marked_processed(self, mock_probe, session):
        entry = _entry(event_type="ServerDeleted")

        await _worker(CompositeEventHandler(), mock_probe)._process_entries(
            [entry], session
        )

        assert "processed_at" in _update_values(session)
        mock_probe.event_without_handler.assert_called_once_with(
            entry.id, "ServerDeleted"
        )

    @pytest.mark.asyncio
    async def test_failure_schedules_retry(self, mock_probe, session):
        composite = CompositeEventHandler()
        composite.register(RecordingHandler(fail=True))
        entry = _entry(retry_count=0)

        await _worker(composite, mock_probe)._process_entries([entry], session)

        values = _update_values(session)
        assert values["retry_count"] == 1
        assert values["last_error"] == "smtp relay down"
        assert "failed_at" not in values
        mock_probe.event_retry_scheduled.assert_called_once()

    @pytest.mark.asyncio
    async def test_last_attempt_dead_letters(self, mock_probe, session):
        composite = CompositeEventHandler()
        composite.register(RecordingHandler(fail=True))
        entry = _entry(retry_count=2)

        await _worker(composite, mock_probe, max_retries=3)._process_entries(
            [entry], session
        )

        values = _update_values(session)
        assert values["retry_count"] == 3
        assert values["failed_at"] is not None
        mock_probe.event_dead_lettered.assert_called_once_with(
            entry.id, entry.event_type, "smtp relay down", 3
        )
