"""Infrastructure for the transactional outbox.

Contains the SQLAlchemy model, the append-only repository, the composite
event handler and the background worker.
"""

from infrastructure.outbox.composite import CompositeEventHandler
from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.outbox.worker import OutboxWorker

__all__ = [
    "CompositeEventHandler",
    "OutboxModel",
    "OutboxRepository",
    "OutboxWorker",
]
