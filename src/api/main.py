"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_session_factory,
)
from infrastructure.database.engines import build_listen_url
from infrastructure.exception_handlers import register_exception_handlers
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultApplicationProbe
from infrastructure.outbox import CompositeEventHandler, OutboxWorker
from infrastructure.outbox.event_sources import PostgresNotifyEventSource
from infrastructure.settings import (
    get_database_settings,
    get_outbox_settings,
    get_settings,
)
from monitoring.presentation import router as monitoring_router
from notifications.application.services import ProbeAlertHandler
from notifications.dependencies.dispatch import (
    get_notification_dispatcher,
    get_notification_store,
)
from notifications.presentation import router as notifications_router
from shared_kernel.outbox.observability import DefaultOutboxWorkerProbe

_probe = DefaultApplicationProbe()


def build_outbox_worker() -> OutboxWorker:
    """Wire the outbox worker with every context's event handlers."""
    settings = get_outbox_settings()
    worker_probe = DefaultOutboxWorkerProbe()

    handler = CompositeEventHandler(probe=worker_probe)
    handler.register(
        ProbeAlertHandler(
            dispatcher=get_notification_dispatcher(),
            store=get_notification_store(),
        ),
        context_name="notifications",
    )

    return OutboxWorker(
        session_factory=get_session_factory(),
        handler=handler,
        probe=worker_probe,
        event_source=PostgresNotifyEventSource(
            db_url=build_listen_url(get_database_settings())
        ),
        poll_interval_seconds=settings.poll_interval_seconds,
        batch_size=settings.batch_size,
        max_retries=settings.max_retries,
    )


@asynccontextmanager
async def servmon_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Outbox worker startup and shutdown
    - Connection pool disposal on shutdown
    """
    configure_logging(get_settings().log_level)

    worker: OutboxWorker | None = None
    if get_outbox_settings().enabled:
        worker = build_outbox_worker()
        await worker.start()
    _probe.application_started(outbox_worker_enabled=worker is not None)

    try:
        yield
    finally:
        if worker is not None:
            await worker.stop()
        await close_database_connections()
        _probe.application_stopped()


app = FastAPI(
    title="ServMon API",
    description="Multi-tenant infrastructure monitoring",
    version="0.1.0",
    lifespan=servmon_lifespan,
)

register_exception_handlers(app, _probe)

app.include_router(iam_router)
app.include_router(monitoring_router)
app.include_router(notifications_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
