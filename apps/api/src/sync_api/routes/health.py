"""Health check routes."""

from fastapi import APIRouter, Depends

from sync_api.config import Settings, get_settings
from sync_api.models.health import HealthCheckResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
) -> HealthCheckResponse:
    """Health check endpoint.

    Returns:
        HealthCheckResponse with status and version information
    """
    return HealthCheckResponse(
        status="ok",
        version=settings.app_version,
        environment=settings.environment,
        store_backend=settings.user_store_backend,
        metadata_write_back=settings.metadata_write_back_enabled,
    )
