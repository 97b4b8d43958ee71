"""Derivation of a probe's status from a raw check result."""

from __future__ import annotations

from monitoring.domain.value_objects import (
    CheckResult,
    HttpCheck,
    ProbeCheck,
    ProbeStatus,
    WebhookCheck,
)


def derive_status(check: ProbeCheck, result: CheckResult) -> tuple[ProbeStatus, str]:
    """Compute the status and a human-readable message for a result.

    A transport failure is an ERROR. A check that reached its target but
    did not get what it expected is a WARNING.
    """
    if not result.success:
        return ProbeStatus.ERROR, result.error or "Check failed"

    match check:
        case HttpCheck():
            return _derive_http(check, result)
        case WebhookCheck():
            return _derive_webhook(check, result)


def _derive_http(check: HttpCheck, result: CheckResult) -> tuple[ProbeStatus, str]:
    if (
        check.expected_status is not None
        and result.observed_status_code != check.expected_status
    ):
        return (
            ProbeStatus.WARNING,
            f"Expected status {check.expected_status}, "
            f"got {result.observed_status_code}",
        )

    if check.expected_keyword is not None and (
        result.observed_body is None or check.expected_keyword not in result.observed_body
    ):
        return (
            ProbeStatus.WARNING,
            f"Keyword '{check.expected_keyword}' not found in response",
        )

    if result.observed_status_code is not None:
        return ProbeStatus.OK, f"HTTP {result.observed_status_code}"
    return ProbeStatus.OK, "Check succeeded"


def _derive_webhook(
    check: WebhookCheck, result: CheckResult
) -> tuple[ProbeStatus, str]:
    if check.expected_payload is None:
        return ProbeStatus.OK, "Payload received"
    if result.observed_payload == check.expected_payload:
        return ProbeStatus.OK, "Payload matches expected payload"
    return ProbeStatus.WARNING, "Payload does not match expected payload"
