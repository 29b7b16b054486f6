"""Route initialization module."""

from fastapi import APIRouter

from sync_api.routes.health import router as health_router
from sync_api.routes.user import router as user_router
from sync_api.routes.webhooks import router as webhooks_router

# Create main API router
api_router = APIRouter(prefix="/api")

# Include sub-routers
api_router.include_router(health_router)
api_router.include_router(user_router)
api_router.include_router(webhooks_router)


__all__ = ["api_router"]
