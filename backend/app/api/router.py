"""API router aggregator.

All endpoint routers are included here and mounted under /api.
"""

from fastapi import APIRouter

from app.api.routes import auth, users

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

router.include_router(auth.router, tags=["auth"])

# =============================================================================
# User directory
# =============================================================================

router.include_router(users.router, prefix="/users", tags=["users"])
