"""Health check endpoint with a database connectivity probe."""

from fastapi import APIRouter, Request

from userroles.api.v1.deps import AppSettings
from userroles.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(request: Request, settings: AppSettings) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    connected = request.app.state.gateway.is_connected()
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
