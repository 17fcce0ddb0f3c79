"""Health check endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.catalog import catalog

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class HealthDetailResponse(HealthResponse):
    """Detailed health check response with descriptor catalog status."""

    descriptors: int


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=HealthDetailResponse)
async def readiness_check() -> HealthDetailResponse:
    """Readiness check including the number of registered descriptors."""
    count = len(catalog.names())

    return HealthDetailResponse(
        status="ok" if count else "degraded",
        version=__version__,
        descriptors=count,
    )
