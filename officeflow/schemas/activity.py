"""Activity feed API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ActivityResponse(BaseModel):
    """Activity feed entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    action: str
    target: str
    user_id: str
    details: dict[str, Any] | None
    created_at: datetime
