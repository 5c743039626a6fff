"""Notification API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    sent_by_id: str | None
    sent_to_id: str
    is_read: bool
    created_at: datetime


class NotificationClearResponse(BaseModel):
    deleted: int
