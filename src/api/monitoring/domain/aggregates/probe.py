"""Probe aggregate: a check definition attached to one server."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from monitoring.domain.events import ProbeStatusChanged
from monitoring.domain.status import derive_status
from monitoring.domain.value_objects import (
    CheckResult,
    HttpCheck,
    ProbeCheck,
    ProbeId,
    ProbeStatus,
    ProbeType,
    ServerId,
    WebhookCheck,
)

if TYPE_CHECKING:
    from monitoring.domain.aggregates.server import Server
    from monitoring.domain.events import DomainEvent


@dataclass(frozen=True)
class StatusTransition:
    """A change of status produced by an evaluation."""

    old_status: ProbeStatus
    new_status: ProbeStatus
    message: str
    at: datetime


@dataclass
class Probe:
    """A check definition with its current health.

    Business rules:
    - Exactly one check variant (HTTP or WEBHOOK); the type follows it
    - A webhook token never changes once assigned
    - Status is only changed through ``evaluate``
    """

    id: ProbeId
    server_id: ServerId
    name: str
    check: ProbeCheck
    group_ids: frozenset[str] = frozenset()
    status: ProbeStatus = ProbeStatus.UNKNOWN
    last_checked_at: datetime | None = None
    last_message: str | None = None
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        server_id: ServerId,
        name: str,
        check: ProbeCheck,
        group_ids: frozenset[str],
    ) -> Probe:
        _validate_name(name)
        return cls(
            id=ProbeId.generate(),
            server_id=server_id,
            name=name,
            check=check,
            group_ids=group_ids,
        )

    @property
    def type(self) -> ProbeType:
        return self.check.probe_type

    @property
    def webhook_token(self) -> str | None:
        if isinstance(self.check, WebhookCheck):
            return self.check.token
        return None

    def update(
        self,
        name: str | None = None,
        group_ids: frozenset[str] | None = None,
    ) -> None:
        if name is not None:
            _validate_name(name)
            self.name = name
        if group_ids is not None:
            self.group_ids = group_ids

    def configure_http(self, check: HttpCheck) -> None:
        """Replace the check with HTTP settings, dropping any webhook token."""
        self.check = check

    def configure_webhook(self, expected_payload: Any = None) -> None:
        """Switch to, or reconfigure, a webhook check.

        An existing token is kept; a new one is issued only when the probe
        was not a webhook probe before.
        """
        if isinstance(self.check, WebhookCheck):
            self.check = WebhookCheck(
                token=self.check.token, expected_payload=expected_payload
            )
        else:
            self.check = WebhookCheck.with_new_token(expected_payload)

    def evaluate(self, result: CheckResult, server: Server) -> StatusTransition | None:
        """Apply a check result.

        The last-seen fields are always updated. When the status changes,
        a transition is returned and, for a change into WARNING or ERROR,
        a ProbeStatusChanged event is recorded.
        """
        new_status, message = derive_status(self.check, result)
        old_status = self.status

        self.status = new_status
        self.last_checked_at = result.timestamp
        self.last_message = message

        if new_status == old_status:
            return None

        if new_status.is_alerting:
            self._pending_events.append(
                ProbeStatusChanged(
                    probe_id=self.id.value,
                    probe_name=self.name,
                    server_id=server.id.value,
                    server_name=server.name,
                    server_group_ids=tuple(sorted(server.group_ids)),
                    old_status=old_status.value,
                    new_status=new_status.value,
                    message=message,
                    occurred_at=result.timestamp,
                )
            )
        return StatusTransition(
            old_status=old_status,
            new_status=new_status,
            message=message,
            at=result.timestamp,
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events


def _validate_name(name: str) -> None:
    if not name or not name.strip() or len(name) > 255:
        raise ValueError("Probe name must be between 1 and 255 characters")
