"""Unit tests for deriving a probe's status from a check result."""

from datetime import UTC, datetime

import pytest

from monitoring.domain.status import derive_status
from monitoring.domain.value_objects import (
    CheckResult,
    HttpCheck,
    ProbeStatus,
    WebhookCheck,
)

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=UTC)


def _result(**kwargs) -> CheckResult:
    return CheckResult(probe_id="p1", timestamp=NOW, **kwargs)


class TestHttpStatus:
    def test_transport_failure_is_error(self):
        check = HttpCheck(url="https://x.test", expected_status=200)

        status, message = derive_status(
            check, _result(success=False, error="connection refused")
        )

        assert status == ProbeStatus.ERROR
        assert message == "connection refused"

    def test_unexpected_status_is_warning(self):
        check = HttpCheck(url="https://x.test", expected_status=200)

        status, message = derive_status(
            check, _result(success=True, observed_status_code=500)
        )

        assert status == ProbeStatus.WARNING
        assert "500" in message

    def test_expected_status_is_ok(self):
        check = HttpCheck(url="https://x.test", expected_status=200)

        status, _ = derive_status(check, _result(success=True, observed_status_code=200))

        assert status == ProbeStatus.OK

    def test_missing_keyword_is_warning(self):
        check = HttpCheck(url="https://x.test", expected_keyword="healthy")

        status, _ = derive_status(
            check, _result(success=True, observed_status_code=200, observed_body="down")
        )

        assert status == ProbeStatus.WARNING

    def test_no_expectations_is_ok(self):
        check = HttpCheck(url="https://x.test")

        status, _ = derive_status(check, _result(success=True, observed_status_code=503))

        assert status == ProbeStatus.OK


class TestWebhookStatus:
    @pytest.mark.parametrize(
        ("expected", "observed", "status"),
        [
            (None, {"anything": 1}, ProbeStatus.OK),
            ({"state": "up"}, {"state": "up"}, ProbeStatus.OK),
            ({"state": "up"}, {"state": "up", "extra": 1}, ProbeStatus.WARNING),
            ({"state": "up"}, {"state": "down"}, ProbeStatus.WARNING),
        ],
    )
    def test_payload_matching_is_exact(self, expected, observed, status):
        check = WebhookCheck(token="t", expected_payload=expected)

        derived, _ = derive_status(
            check, _result(success=True, observed_payload=observed)
        )

        assert derived == status

    def test_missed_heartbeat_is_error(self):
        check = WebhookCheck(token="t")

        status, _ = derive_status(check, _result(success=False))

        assert status == ProbeStatus.ERROR
