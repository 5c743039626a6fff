"""Health check endpoint. No database access; used for liveness checks."""

from fastapi import APIRouter, Request

from officeflow.core.config import get_settings
from officeflow.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    worker = getattr(request.app.state, "notification_worker", None)
    return HealthResponse(
        version=get_settings().app_version,
        notification_worker=worker is not None and worker.running,
    )
