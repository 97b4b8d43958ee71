"""Domain probe for the probe status tracker.

Status transitions are the events operators care about most: they are
logged at WARNING when a probe starts alerting and at INFO otherwise.
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class StatusTrackerProbe(Protocol):
    def result_recorded(self, probe_id: str, status: str) -> None:
        """Record that a result was evaluated without changing the status."""
        ...

    def status_changed(
        self, probe_id: str, old_status: str, new_status: str, message: str
    ) -> None:
        ...

    def alert_resolved(self, probe_id: str, alert_id: str) -> None:
        ...

    def unknown_webhook_token(self, token: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> StatusTrackerProbe:
        ...


class DefaultStatusTrackerProbe(StructlogProbe):
    def result_recorded(self, probe_id: str, status: str) -> None:
        self._log.debug(
            "probe_result_recorded",
            probe_id=probe_id,
            status=status,
        )

    def status_changed(
        self, probe_id: str, old_status: str, new_status: str, message: str
    ) -> None:
        log = (
            self._log.warning
            if new_status in ("WARNING", "ERROR")
            else self._log.info
        )
        log(
            "probe_status_changed",
            probe_id=probe_id,
            old_status=old_status,
            new_status=new_status,
            message=message,
        )

    def alert_resolved(self, probe_id: str, alert_id: str) -> None:
        self._log.info(
            "probe_alert_resolved",
            probe_id=probe_id,
            alert_id=alert_id,
        )

    def unknown_webhook_token(self, token: str) -> None:
        self._log.warning(
            "webhook_probe_token_unknown",
            token_prefix=token[:8],
        )
