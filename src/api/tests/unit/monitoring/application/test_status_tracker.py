"""Unit tests for ProbeStatusTracker.

Covers the transition rules: alert history is written only when the
status changes, and a recovery resolves the open entry.
"""

from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from monitoring.application.observability import StatusTrackerProbe
from monitoring.application.services import ProbeStatusTracker
from monitoring.domain.aggregates import Probe, Server
from monitoring.domain.alert_history import AlertHistoryEntry
from monitoring.domain.value_objects import (
    CheckResult,
    HttpCheck,
    ProbeStatus,
    ServerType,
    WebhookCheck,
)
from monitoring.ports.exceptions import UnknownWebhookTokenError
from monitoring.ports.repositories import (
    IAlertHistoryRepository,
    IProbeRepository,
    IServerRepository,
)
from shared_kernel.authorization.types import probe_ref
from shared_kernel.exceptions import AccessDeniedError, ResourceNotFoundError

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=UTC)


@pytest.fixture
def server() -> Server:
    return Server.create(
        name="web-1",
        server_type=ServerType.APPLICATION,
        group_ids=frozenset({"g1"}),
        created_by_id="user-1",
    )


@pytest.fixture
def http_probe(server) -> Probe:
    probe = Probe.create(
        server_id=server.id,
        name="p1",
        check=HttpCheck(url="https://x.test", expected_status=200),
        group_ids=server.group_ids,
    )
    probe.status = ProbeStatus.OK
    return probe


@pytest.fixture
def mock_server_repository(server):
    repo = create_autospec(IServerRepository, instance=True)
    repo.get_by_id.return_value = server
    return repo


@pytest.fixture
def mock_probe_repository():
    return create_autospec(IProbeRepository, instance=True)


@pytest.fixture
def mock_alert_repository():
    repo = create_autospec(IAlertHistoryRepository, instance=True)
    repo.get_open.return_value = None
    return repo


@pytest.fixture
def mock_probe():
    return create_autospec(StatusTrackerProbe, instance=True)


@pytest.fixture
def tracker(
    mock_session,
    mock_server_repository,
    mock_probe_repository,
    mock_alert_repository,
    mock_authz,
    mock_probe,
):
    return ProbeStatusTracker(
        session=mock_session,
        server_repository=mock_server_repository,
        probe_repository=mock_probe_repository,
        alert_repository=mock_alert_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


class TestRecordResult:
    @pytest.mark.asyncio
    async def test_unexpected_status_opens_alert(
        self, tracker, http_probe, mock_probe_repository, mock_alert_repository, user_actor
    ):
        mock_probe_repository.get_by_id.return_value = http_probe

        await tracker.record_result(
            user_actor,
            CheckResult(
                probe_id=http_probe.id.value,
                success=True,
                observed_status_code=500,
                timestamp=NOW,
            ),
        )

        assert http_probe.status == ProbeStatus.WARNING
        mock_alert_repository.add.assert_awaited_once()
        entry = mock_alert_repository.add.await_args.args[0]
        assert entry.status == ProbeStatus.WARNING
        assert entry.resolved is False
        mock_probe_repository.save.assert_awaited_once_with(http_probe)

    @pytest.mark.asyncio
    async def test_recovery_resolves_open_alert_without_new_entry(
        self, tracker, http_probe, mock_probe_repository, mock_alert_repository, user_actor
    ):
        http_probe.status = ProbeStatus.WARNING
        open_entry = AlertHistoryEntry.open(
            http_probe.id.value, ProbeStatus.WARNING, "Expected status 200, got 500", NOW
        )
        mock_probe_repository.get_by_id.return_value = http_probe
        mock_alert_repository.get_open.return_value = open_entry
        later = datetime(2026, 10, 16, 12, 5, tzinfo=UTC)
        before = datetime.now(UTC)

        await tracker.record_result(
            user_actor,
            CheckResult(
                probe_id=http_probe.id.value,
                success=True,
                observed_status_code=200,
                timestamp=later,
            ),
        )

        assert http_probe.status == ProbeStatus.OK
        assert open_entry.resolved is True
        # Resolution time is when the result arrived, not the checker clock.
        assert before <= open_entry.resolved_at <= datetime.now(UTC)
        mock_alert_repository.update.assert_awaited_once_with(open_entry)
        mock_alert_repository.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unchanged_status_writes_no_history(
        self, tracker, http_probe, mock_probe_repository, mock_alert_repository, user_actor
    ):
        mock_probe_repository.get_by_id.return_value = http_probe

        await tracker.record_result(
            user_actor,
            CheckResult(
                probe_id=http_probe.id.value,
                success=True,
                observed_status_code=200,
                timestamp=NOW,
            ),
        )

        mock_alert_repository.add.assert_not_called()
        mock_alert_repository.update.assert_not_called()
        assert http_probe.last_checked_at == NOW
        mock_probe_repository.save.assert_awaited_once_with(http_probe)

    @pytest.mark.asyncio
    async def test_escalation_resolves_and_reopens(
        self, tracker, http_probe, mock_probe_repository, mock_alert_repository, user_actor
    ):
        http_probe.status = ProbeStatus.WARNING
        open_entry = AlertHistoryEntry.open(
            http_probe.id.value, ProbeStatus.WARNING, "warn", NOW
        )
        mock_probe_repository.get_by_id.return_value = http_probe
        mock_alert_repository.get_open.return_value = open_entry

        await tracker.record_result(
            user_actor,
            CheckResult(probe_id=http_probe.id.value, success=False, timestamp=NOW),
        )

        assert open_entry.resolved is True
        entry = mock_alert_repository.add.await_args.args[0]
        assert entry.status == ProbeStatus.ERROR

    @pytest.mark.asyncio
    async def test_requires_administer_on_probe(
        self, tracker, http_probe, mock_authz, mock_probe_repository, user_actor
    ):
        mock_authz.require_administer.side_effect = AccessDeniedError("no")

        with pytest.raises(AccessDeniedError):
            await tracker.record_result(
                user_actor,
                CheckResult(probe_id=http_probe.id.value, success=True, timestamp=NOW),
            )

        mock_authz.require_administer.assert_awaited_once_with(
            user_actor, probe_ref(http_probe.id.value)
        )
        mock_probe_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_probe_id_is_not_found(self, tracker, user_actor):
        with pytest.raises(ResourceNotFoundError):
            await tracker.record_result(
                user_actor, CheckResult(probe_id="nope", success=True, timestamp=NOW)
            )


class TestReceiveWebhook:
    @pytest.mark.asyncio
    async def test_matching_payload_is_ok(
        self, tracker, server, mock_probe_repository
    ):
        probe = Probe.create(
            server_id=server.id,
            name="heartbeat",
            check=WebhookCheck(token="tok", expected_payload={"state": "up"}),
            group_ids=server.group_ids,
        )
        mock_probe_repository.get_by_webhook_token.return_value = probe

        await tracker.receive_webhook("tok", {"state": "up"})

        assert probe.status == ProbeStatus.OK

    @pytest.mark.asyncio
    async def test_unknown_token(self, tracker, mock_probe_repository, mock_probe):
        mock_probe_repository.get_by_webhook_token.return_value = None

        with pytest.raises(UnknownWebhookTokenError):
            await tracker.receive_webhook("missing", {})

        mock_probe.unknown_webhook_token.assert_called_once_with("missing")
