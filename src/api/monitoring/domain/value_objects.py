"""Value objects for the monitoring domain.

Identifiers, enumerations and the type-specific probe check
definitions. A probe's check is a tagged variant: the probe type is
derived from which variant it holds, so a probe can never carry the
settings of both kinds or of neither.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ulid import ULID


@dataclass(frozen=True)
class ServerId:
    """Identifier for a Server aggregate (ULID)."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> ServerId:
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ServerId:
        """Raises ValueError if value is not a valid ULID."""
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ServerId: {value}") from e
        return cls(value=value)


@dataclass(frozen=True)
class ProbeId:
    """Identifier for a Probe aggregate (ULID)."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> ProbeId:
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ProbeId:
        """Raises ValueError if value is not a valid ULID."""
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ProbeId: {value}") from e
        return cls(value=value)


class ServerType(StrEnum):
    DATABASE = "DATABASE"
    APPLICATION = "APPLICATION"
    MAIL = "MAIL"
    OTHER = "OTHER"


class ProbeType(StrEnum):
    HTTP = "HTTP"
    WEBHOOK = "WEBHOOK"


class ProbeStatus(StrEnum):
    """Health of a probe. UNKNOWN until the first evaluation."""

    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"

    @property
    def is_alerting(self) -> bool:
        return self in (ProbeStatus.WARNING, ProbeStatus.ERROR)


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class HttpCheck:
    """Settings of an HTTP probe, used by the external checker."""

    url: str
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    expected_status: int | None = None
    expected_keyword: str | None = None
    timeout_ms: int = 30000
    check_interval_s: int = 300

    @property
    def probe_type(self) -> ProbeType:
        return ProbeType.HTTP


@dataclass(frozen=True)
class WebhookCheck:
    """Settings of a WEBHOOK probe.

    The token identifies the probe's inbound endpoint and never changes
    once assigned. ``expected_payload=None`` accepts any payload.
    """

    token: str
    expected_payload: Any = None

    @property
    def probe_type(self) -> ProbeType:
        return ProbeType.WEBHOOK

    @classmethod
    def with_new_token(cls, expected_payload: Any = None) -> WebhookCheck:
        return cls(token=str(uuid.uuid4()), expected_payload=expected_payload)


ProbeCheck = HttpCheck | WebhookCheck


@dataclass(frozen=True)
class CheckResult:
    """A raw check outcome reported by the external checker.

    Attributes:
        probe_id: The probe the result belongs to
        success: False when the check failed at the transport level
            (timeout, connection refused) or, for webhook probes, when
            no heartbeat arrived in time
        observed_status_code: HTTP status returned by the target
        observed_body: Response body returned by the target
        observed_payload: Payload delivered to a webhook probe
        timestamp: When the check ran
        error: Checker-provided failure description
    """

    probe_id: str
    success: bool
    timestamp: datetime
    observed_status_code: int | None = None
    observed_body: str | None = None
    observed_payload: Any = None
    error: str | None = None
