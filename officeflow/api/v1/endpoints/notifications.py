"""Notification inbox API for the current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from officeflow.api.v1.dependencies import CurrentUser, get_notification_inbox
from officeflow.application.use_cases.notifications import NotificationInbox
from officeflow.schemas.notification import (
    NotificationClearResponse,
    NotificationResponse,
)

router = APIRouter()

Inbox = Annotated[NotificationInbox, Depends(get_notification_inbox)]


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUser,
    inbox: Inbox,
    limit: int = Query(10, ge=1, le=100),
):
    notifications = await inbox.list_recent(current_user, limit=limit)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: CurrentUser,
    inbox: Inbox,
):
    """Mark one notification as read (recipient only)."""
    notification = await inbox.mark_read(notification_id, current_user)
    return NotificationResponse.model_validate(notification)


@router.delete("", response_model=NotificationClearResponse)
async def clear_notifications(current_user: CurrentUser, inbox: Inbox):
    """Delete all of the current user's notifications."""
    return NotificationClearResponse(deleted=await inbox.clear(current_user))
