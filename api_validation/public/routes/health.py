"""
Health check endpoint. Minimal, stable, no business logic.
"""
from fastapi import APIRouter
from datetime import datetime
import os
from api_validation.public.schemas import HealthResponse
from api_validation.public.settings import settings

router = APIRouter()

# Hosting platforms may inject the deployed commit under their own name.
build_commit = (
    os.getenv("RENDER_GIT_COMMIT")
    or os.getenv("SOURCE_COMMIT")
    or settings.build_commit
)


@router.get("/health")
async def health_check() -> HealthResponse:
    """
    Simple health check. Returns service status, version, commit.
    """
    return HealthResponse(
        status="ok",
        service="array-validation-api",
        version=settings.api_version,
        commit=build_commit,
        timestamp=datetime.utcnow().isoformat() + "Z"
    )
