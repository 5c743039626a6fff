"""Client history API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClientNoteRequest(BaseModel):
    """Request body for adding a general history note."""

    content: str = Field(..., min_length=1, max_length=10000)


class ClientHistoryResponse(BaseModel):
    """One client history record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str
    type: str
    content: str
    created_by_id: str | None
    task_id: str | None
    task_title: str | None
    task_description: str | None
    task_status: str | None
    task_completed_date: datetime | None
    task_billed_date: datetime | None
    billing_details: dict[str, Any] | None
    created_at: datetime
