"""Probe status tracker.

Turns raw check results into probe status, keeps the alert history
ledger and, through the outbox, triggers notification dispatch for
every change into WARNING or ERROR.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from monitoring.application.observability import (
    DefaultStatusTrackerProbe,
    StatusTrackerProbe,
)
from monitoring.domain.aggregates import Probe, StatusTransition
from monitoring.domain.alert_history import AlertHistoryEntry
from monitoring.domain.value_objects import CheckResult, ProbeId, ProbeStatus
from monitoring.ports.exceptions import UnknownWebhookTokenError
from monitoring.ports.repositories import (
    IAlertHistoryRepository,
    IProbeRepository,
    IServerRepository,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor, probe_ref
from shared_kernel.exceptions import InvariantViolationError, ResourceNotFoundError


class ProbeStatusTracker:
    """Evaluates check results, one probe at a time.

    The probe row is locked for the duration of an evaluation, so two
    results for the same probe cannot both observe the old status. The
    probe update, the alert history change and the ProbeStatusChanged
    outbox entry commit together.
    """

    def __init__(
        self,
        session: AsyncSession,
        server_repository: IServerRepository,
        probe_repository: IProbeRepository,
        alert_repository: IAlertHistoryRepository,
        authz: AuthorizationProvider,
        probe: StatusTrackerProbe | None = None,
    ):
        self._session = session
        self._server_repository = server_repository
        self._probe_repository = probe_repository
        self._alert_repository = alert_repository
        self._authz = authz
        self._probe = probe or DefaultStatusTrackerProbe()

    async def record_result(self, actor: Actor, result: CheckResult) -> Probe:
        """Record a result reported by the external checker.

        The checker acts as a user who administers the probe.

        Raises:
            ResourceNotFoundError: If the probe does not exist
            AccessDeniedError: If the checker may not administer the probe
        """
        try:
            probe_id = ProbeId.from_string(result.probe_id)
        except ValueError as e:
            raise ResourceNotFoundError("probe", result.probe_id) from e

        async with self._session.begin():
            await self._authz.require_administer(actor, probe_ref(probe_id.value))
            probe = await self._probe_repository.get_by_id(probe_id, for_update=True)
            if probe is None:
                raise ResourceNotFoundError("probe", probe_id.value)
            await self._evaluate(probe, result)

        return probe

    async def receive_webhook(self, token: str, payload: Any) -> Probe:
        """Record a payload delivered to a webhook probe's endpoint.

        The token is the credential: no user is involved.

        Raises:
            UnknownWebhookTokenError: If no probe owns the token
        """
        async with self._session.begin():
            probe = await self._probe_repository.get_by_webhook_token(
                token, for_update=True
            )
            if probe is None:
                self._probe.unknown_webhook_token(token)
                raise UnknownWebhookTokenError(token)

            result = CheckResult(
                probe_id=probe.id.value,
                success=True,
                observed_payload=payload,
                timestamp=datetime.now(UTC),
            )
            await self._evaluate(probe, result)

        return probe

    async def _evaluate(self, probe: Probe, result: CheckResult) -> None:
        server = await self._server_repository.get_by_id(probe.server_id)
        if server is None:
            raise InvariantViolationError(
                f"Probe {probe.id.value} references missing server {probe.server_id.value}"
            )

        transition = probe.evaluate(result, server)
        if transition is None:
            self._probe.result_recorded(probe.id.value, probe.status.value)
        else:
            await self._record_transition(probe, transition)
            self._probe.status_changed(
                probe.id.value,
                transition.old_status.value,
                transition.new_status.value,
                transition.message,
            )

        await self._probe_repository.save(probe)

    async def _record_transition(
        self, probe: Probe, transition: StatusTransition
    ) -> None:
        # At most one unresolved entry per probe.
        open_entry = await self._alert_repository.get_open(probe.id)
        if open_entry is not None:
            open_entry.resolve(datetime.now(UTC))
            await self._alert_repository.update(open_entry)
            self._probe.alert_resolved(probe.id.value, open_entry.id)

        if transition.new_status.is_alerting:
            await self._alert_repository.add(
                AlertHistoryEntry.open(
                    probe_id=probe.id.value,
                    status=transition.new_status,
                    message=transition.message,
                    at=transition.at,
                )
            )
        elif transition.new_status != ProbeStatus.OK:
            raise InvariantViolationError(
                f"Probe {probe.id.value} moved to {transition.new_status}"
            )
