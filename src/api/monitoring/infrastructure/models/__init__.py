"""SQLAlchemy ORM models for the monitoring bounded context."""

from monitoring.infrastructure.models.alert_history import AlertHistoryModel
from monitoring.infrastructure.models.probe import (
    HttpProbeModel,
    ProbeGroupModel,
    ProbeModel,
    WebhookProbeModel,
)
from monitoring.infrastructure.models.server import ServerGroupModel, ServerModel

__all__ = [
    "AlertHistoryModel",
    "HttpProbeModel",
    "ProbeGroupModel",
    "ProbeModel",
    "ServerGroupModel",
    "ServerModel",
    "WebhookProbeModel",
]
