"""Maps the shared error taxonomy to HTTP responses.

Context-specific exceptions subclass the shared bases, so registering
the bases here covers every bounded context.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from infrastructure.observability import ApplicationProbe, DefaultApplicationProbe
from shared_kernel.exceptions import (
    AccessDeniedError,
    ConflictError,
    InvalidInputError,
    InvariantViolationError,
    ResourceNotFoundError,
)


def _error(status_code: int, message: str, errors: object = None) -> JSONResponse:
    content: dict[str, object] = {"message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(
    app: FastAPI, probe: ApplicationProbe | None = None
) -> None:
    """Install the handlers on the application."""
    probe = probe or DefaultApplicationProbe()

    @app.exception_handler(AccessDeniedError)
    async def access_denied(request: Request, exc: AccessDeniedError) -> JSONResponse:
        return _error(status.HTTP_403_FORBIDDEN, str(exc) or "Access denied")

    @app.exception_handler(ResourceNotFoundError)
    async def not_found(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(ConflictError)
    async def conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc), exc.errors)

    @app.exception_handler(ValueError)
    async def value_error(request: Request, exc: ValueError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_failed(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = {
            ".".join(str(part) for part in error["loc"]): error["msg"]
            for error in exc.errors()
        }
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", errors)

    @app.exception_handler(InvariantViolationError)
    async def invariant_violated(
        request: Request, exc: InvariantViolationError
    ) -> JSONResponse:
        probe.unhandled_invariant_violation(request.url.path, str(exc))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
