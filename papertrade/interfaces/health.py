"""
Health check router.

Provides a simple health endpoint for liveness/readiness probes.
No business logic. Returns application status and version.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from papertrade.core.config import Settings
from papertrade.interfaces.dependencies import get_settings
from papertrade.interfaces.envelope import Envelope, ok

router = APIRouter(tags=["health"])


class HealthData(BaseModel):
    status: str
    version: str


@router.get(
    "/health",
    response_model=Envelope[HealthData],
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check(settings: Settings = Depends(get_settings)) -> dict:
    """Return current application health status."""
    return ok(HealthData(status="ok", version=settings.version), message="Server is running")
