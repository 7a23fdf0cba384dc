"""
Health check router.

Provides a simple health endpoint for liveness/readiness probes.
Failures are documented with the shared error envelope.
"""

from fastapi import APIRouter

from authserver.core.config import settings
from authserver.interfaces.schemas import HealthResponse
from authserver.shared.errors.schemas import ErrorEnvelope

router = APIRouter(tags=["health"], responses={500: {"model": ErrorEnvelope}})


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)
