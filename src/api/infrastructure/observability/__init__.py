"""Domain-oriented observability for infrastructure concerns.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from infrastructure.observability.context import get_observation_context
from infrastructure.observability.probes import (
    ApplicationProbe,
    DatabaseProbe,
    DefaultApplicationProbe,
    DefaultDatabaseProbe,
)
from shared_kernel.observability_context import ObservationContext

__all__ = [
    "ApplicationProbe",
    "DatabaseProbe",
    "DefaultApplicationProbe",
    "DefaultDatabaseProbe",
    "ObservationContext",
    "get_observation_context",
]
