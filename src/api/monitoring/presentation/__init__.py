"""Monitoring presentation layer: servers, probes and alert history."""

from __future__ import annotations

from fastapi import APIRouter

from monitoring.presentation.alerts.routes import router as alerts_router
from monitoring.presentation.probes.routes import router as probes_router
from monitoring.presentation.servers.routes import router as servers_router

router = APIRouter()

router.include_router(servers_router)
router.include_router(probes_router)
router.include_router(alerts_router)

__all__ = ["router"]
