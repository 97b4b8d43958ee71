"""Pydantic models for probe API requests and responses.

Probe requests are a discriminated union on ``type``: an HTTP probe
carries HTTP settings and a WEBHOOK probe carries webhook settings,
never both.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, HttpUrl, PositiveInt

from monitoring.application.value_objects import CheckSettings, WebhookSettings
from monitoring.domain.aggregates import Probe
from monitoring.domain.value_objects import (
    CheckResult,
    HttpCheck,
    HttpMethod,
    ProbeStatus,
    ProbeType,
    WebhookCheck,
)


class HttpProbeConfig(BaseModel):
    url: HttpUrl
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    expected_status: PositiveInt | None = None
    expected_keyword: str | None = None
    timeout_ms: PositiveInt = 30000
    check_interval_s: PositiveInt = 300

    def to_check(self) -> HttpCheck:
        return HttpCheck(
            url=str(self.url),
            method=self.method,
            headers=dict(self.headers),
            body=self.body,
            expected_status=self.expected_status,
            expected_keyword=self.expected_keyword,
            timeout_ms=self.timeout_ms,
            check_interval_s=self.check_interval_s,
        )

    @classmethod
    def from_check(cls, check: HttpCheck) -> HttpProbeConfig:
        return cls(
            url=check.url,
            method=check.method,
            headers=dict(check.headers),
            body=check.body,
            expected_status=check.expected_status,
            expected_keyword=check.expected_keyword,
            timeout_ms=check.timeout_ms,
            check_interval_s=check.check_interval_s,
        )


class WebhookProbeConfig(BaseModel):
    expected_payload: Any = Field(
        default=None, description="Payload to match exactly; omit to accept any"
    )


class _ProbeRequestBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    groups: list[str] | None = Field(
        default=None,
        description="Groups to attach; defaults to the server's groups on creation",
    )


class HttpProbeRequest(_ProbeRequestBase):
    type: Literal["HTTP"]
    config: HttpProbeConfig

    def to_settings(self) -> CheckSettings:
        return self.config.to_check()


class WebhookProbeRequest(_ProbeRequestBase):
    type: Literal["WEBHOOK"]
    config: WebhookProbeConfig = Field(default_factory=WebhookProbeConfig)

    def to_settings(self) -> CheckSettings:
        return WebhookSettings(expected_payload=self.config.expected_payload)


ProbeRequest = Annotated[
    HttpProbeRequest | WebhookProbeRequest, Field(discriminator="type")
]


class WebhookProbeDetails(BaseModel):
    token: str
    expected_payload: Any = None


class ProbeResponse(BaseModel):
    id: str
    server_id: str
    name: str
    type: ProbeType
    status: ProbeStatus
    last_checked_at: datetime | None = None
    last_message: str | None = None
    groups: list[str]
    http: HttpProbeConfig | None = None
    webhook: WebhookProbeDetails | None = None

    @classmethod
    def from_domain(cls, probe: Probe) -> ProbeResponse:
        http = None
        webhook = None
        match probe.check:
            case HttpCheck():
                http = HttpProbeConfig.from_check(probe.check)
            case WebhookCheck():
                webhook = WebhookProbeDetails(
                    token=probe.check.token,
                    expected_payload=probe.check.expected_payload,
                )
        return cls(
            id=probe.id.value,
            server_id=probe.server_id.value,
            name=probe.name,
            type=probe.type,
            status=probe.status,
            last_checked_at=probe.last_checked_at,
            last_message=probe.last_message,
            groups=sorted(probe.group_ids),
            http=http,
            webhook=webhook,
        )


class CheckResultRequest(BaseModel):
    """A raw outcome posted by the external checker."""

    probe_id: str
    success: bool
    observed_status_code: int | None = None
    observed_body: str | None = None
    observed_payload: Any = None
    timestamp: datetime | None = None
    error: str | None = None

    def to_result(self) -> CheckResult:
        return CheckResult(
            probe_id=self.probe_id,
            success=self.success,
            timestamp=self.timestamp or datetime.now(UTC),
            observed_status_code=self.observed_status_code,
            observed_body=self.observed_body,
            observed_payload=self.observed_payload,
            error=self.error,
        )


class WebhookReceivedResponse(BaseModel):
    probe_id: str
    status: ProbeStatus
    message: str | None = None
