"""IAM presentation layer - aggregate-based organization.

Each aggregate package (groups, users) contains its own routes and
models; registration is a separate slice since it runs before the
caller is a known user.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation.groups.routes import router as groups_router
from iam.presentation.registration.routes import router as registration_router
from iam.presentation.users.routes import router as users_router

# Auth is enforced per-endpoint: registration needs a valid token but
# not a registered user.
router = APIRouter()

router.include_router(registration_router)
router.include_router(users_router)
router.include_router(groups_router)

__all__ = ["router"]
