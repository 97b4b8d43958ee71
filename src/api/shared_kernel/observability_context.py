"""Request-scoped context for domain probes.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Self

import structlog


@dataclass(frozen=True)
class ObservationContext:
    """Metadata attached to every event a bound probe emits.

    Lets a dispatch attempt be traced back to the request or outbox
    entry that caused it.

    Example:
        context = ObservationContext(request_id="req-123", user_id="user-456")
        probe = DefaultDispatchProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    group_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Return the fields that are set, merged with ``extra``."""
        known = {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "group_id": self.group_id,
        }
        return {k: v for k, v in known.items() if v is not None} | self.extra

    def with_group(self, group_id: str) -> ObservationContext:
        return replace(self, group_id=group_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        return replace(self, extra={**self.extra, **kwargs})


class StructlogProbe:
    """Base class of the default probes.

    Subclasses emit through ``self._log``, which carries the fields of
    the bound context, if any.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def with_context(self, context: ObservationContext) -> Self:
        """Return a copy of this probe bound to ``context``."""
        return type(self)(logger=self._logger, context=context)

    @property
    def _log(self) -> Any:
        if self._context is None:
            return self._logger
        return self._logger.bind(**self._context.as_dict())
