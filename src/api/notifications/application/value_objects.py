"""Application-level value objects for the notifications context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from notifications.domain.aggregates import Notification


@dataclass(frozen=True)
class DispatchOutcome:
    """The definite result of one dispatch attempt.

    ``result`` is the adapter's raw success payload; ``error`` the
    failure detail recorded on the notification.
    """

    notification: Notification
    delivered: bool
    result: Any = None
    error: str | None = None
