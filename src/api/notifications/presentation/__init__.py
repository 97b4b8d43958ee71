"""Notifications presentation layer: configurations, sends and history."""

from __future__ import annotations

from fastapi import APIRouter

from notifications.presentation.configs.routes import router as configs_router
from notifications.presentation.history.routes import router as history_router

router = APIRouter()

# History first so /notifications/history is not taken as a config id.
router.include_router(history_router)
router.include_router(configs_router)

__all__ = ["router"]
