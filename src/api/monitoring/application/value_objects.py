"""Application-layer value objects for the monitoring context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from monitoring.domain.value_objects import HttpCheck


@dataclass(frozen=True)
class WebhookSettings:
    """Requested settings of a webhook probe.

    The token is not part of the request: it is issued when the probe
    becomes a webhook probe and kept afterwards.
    """

    expected_payload: Any = None


CheckSettings = HttpCheck | WebhookSettings
