"""Request-scoped observation context.

Every probe handed to a service by the dependency layer is bound to the
request's context, so all events logged while serving one request carry
the same ``request_id``.
"""

from __future__ import annotations

from uuid import uuid4

from fastapi import Request

from shared_kernel.observability_context import ObservationContext

REQUEST_ID_HEADER = "X-Request-ID"


def get_observation_context(request: Request) -> ObservationContext:
    """Build the context of the current request.

    The caller's ``X-Request-ID`` is reused when present so logs can be
    correlated with an upstream proxy; otherwise a fresh id is issued.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    return ObservationContext(
        request_id=request_id,
        extra={"method": request.method, "path": request.url.path},
    )
