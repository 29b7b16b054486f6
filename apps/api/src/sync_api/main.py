"""Main FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse

from sync_api.config import get_settings
from sync_api.routes import api_router
from sync_api.services import close_services, get_cosmos_connection
from sync_common.errors import UserSyncError

# Initialize settings
settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Handle application lifespan events."""
    # Startup
    current = get_settings()
    current.require_webhook_secret()
    logger.info("%s v%s started", current.app_name, current.app_version)
    logger.info("Environment: %s", current.environment)
    logger.info("User store backend: %s", current.user_store_backend)
    if not current.metadata_write_back_enabled:
        logger.warning("CLERK_SECRET_KEY not set; metadata write-back is disabled")

    if current.user_store_backend == "cosmos":
        logger.info("Connecting to Cosmos DB...")
        try:
            connection = get_cosmos_connection()
            await run_in_threadpool(connection.get_container)
        except UserSyncError as e:
            if current.environment == "production":
                raise
            # In development, connect lazily on the first request instead
            logger.warning("Continuing without Cosmos DB connection (development mode): %s", e)

    yield

    # Shutdown
    close_services()
    logger.info("%s shutting down", current.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Clerk user synchronization - FastAPI webhook service",
    version=settings.app_version,
    lifespan=lifespan,
    redirect_slashes=False,
)


@app.exception_handler(UserSyncError)
async def user_sync_exception_handler(request: Request, exc: UserSyncError) -> JSONResponse:
    """Translate sync errors into their status code with a client-safe message."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Error handling %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler returning a generic 500 body."""
    # Let FastAPI handle HTTPException normally
    if isinstance(exc, HTTPException):
        raise exc

    logger.error("Unhandled exception: %s", exc, exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Error occurred"},
    )


# Include routers
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sync_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
