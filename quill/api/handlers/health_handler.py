"""
Health Check Handler

Provides health check endpoints for monitoring and load balancers.
"""

from fastapi import APIRouter
from pymongo.errors import PyMongoError

from quill.api.dependencies import DbSession
from quill.config.settings import settings
from quill.shared.core.exceptions import ServiceUnavailableError
from quill.shared.schemas.common import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        HealthResponse with service status
    """
    return HealthResponse(
        status="healthy",
        service=settings.APP_NAME.lower(),
        version=settings.APP_VERSION,
    )


@router.get("/ready")
async def readiness_check(db: DbSession):
    """
    Readiness check for Kubernetes/load balancers.

    Pings the database; 503 when it cannot be reached.
    """
    try:
        await db.command("ping")
    except PyMongoError as e:
        raise ServiceUnavailableError("Database is not reachable") from e
    return {"status": "ready"}


@router.get("/live")
async def liveness_check():
    """
    Liveness check for Kubernetes.

    Returns:
        Simple alive status
    """
    return {"status": "alive"}
