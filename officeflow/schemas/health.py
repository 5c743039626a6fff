"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus whether queued notification delivery is active."""

    status: str = Field(default="ok", description="Service status")
    version: str | None = None
    notification_worker: bool = Field(
        default=False,
        description="True when notifications go through the background worker",
    )
