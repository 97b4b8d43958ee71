"""Domain probe for notification dispatch.

Delivery failures are business outcomes: they are recorded on the
notification and logged here at warning level, never raised.
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class DispatchProbe(Protocol):
    """Domain probe for the dispatch engine and the probe alert handler."""

    def notification_sent(
        self, notification_id: str, config_id: str, channel: str
    ) -> None:
        ...

    def notification_failed(
        self, notification_id: str, config_id: str, channel: str, reason: str
    ) -> None:
        ...

    def config_invariant_violated(self, config_id: str, error: str) -> None:
        """Record that a config's stored channel settings are corrupt."""
        ...

    def alert_fanned_out(
        self, probe_id: str, new_status: str, config_count: int
    ) -> None:
        ...

    def config_vanished(self, config_id: str) -> None:
        """Record that a config was deleted before its alert was delivered."""
        ...

    def dispatch_aborted(self, config_id: str, error: str) -> None: ...

    def with_context(self, context: ObservationContext) -> DispatchProbe:
        ...


class DefaultDispatchProbe(StructlogProbe):
    def notification_sent(
        self, notification_id: str, config_id: str, channel: str
    ) -> None:
        self._log.info(
            "notification_sent",
            notification_id=notification_id,
            config_id=config_id,
            channel=channel,
        )

    def notification_failed(
        self, notification_id: str, config_id: str, channel: str, reason: str
    ) -> None:
        self._log.warning(
            "notification_failed",
            notification_id=notification_id,
            config_id=config_id,
            channel=channel,
            reason=reason,
        )

    def config_invariant_violated(self, config_id: str, error: str) -> None:
        self._log.error(
            "notification_config_invariant_violated",
            config_id=config_id,
            error=error,
        )

    def alert_fanned_out(
        self, probe_id: str, new_status: str, config_count: int
    ) -> None:
        self._log.info(
            "probe_alert_fanned_out",
            probe_id=probe_id,
            new_status=new_status,
            config_count=config_count,
        )

    def config_vanished(self, config_id: str) -> None:
        self._log.info(
            "notification_config_vanished",
            config_id=config_id,
        )

    def dispatch_aborted(self, config_id: str, error: str) -> None:
        self._log.error(
            "notification_dispatch_aborted", config_id=config_id, error=error
        )
