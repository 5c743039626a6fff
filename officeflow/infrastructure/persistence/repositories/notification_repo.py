"""Notification repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.notification import (
    NotificationRequest,
    NotificationResult,
)
from officeflow.infrastructure.persistence.models.notification import Notification
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.shared.utils.datetime import ensure_utc


def _to_result(n: Notification) -> NotificationResult:
    """Map Notification ORM to NotificationResult DTO."""
    return NotificationResult(
        id=n.id,
        title=n.title,
        content=n.content,
        sent_by_id=n.sent_by_id,
        sent_to_id=n.sent_to_id,
        is_read=n.is_read,
        created_at=ensure_utc(n.created_at),
    )


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository. Implements INotificationRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Notification)

    async def create(self, request: NotificationRequest) -> NotificationResult:
        notification = Notification(
            title=request.title,
            content=request.content,
            sent_by_id=request.sent_by_id,
            sent_to_id=request.sent_to_id,
            is_read=False,
        )
        notification = await self.add(notification)
        return _to_result(notification)

    async def get_by_id(self, notification_id: str) -> NotificationResult | None:
        notification = await self.get_model(notification_id)
        return _to_result(notification) if notification else None

    async def list_for_recipient(
        self, user_id: str, limit: int = 10
    ) -> list[NotificationResult]:
        stmt = (
            select(Notification)
            .where(Notification.sent_to_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_to_result(n) for n in result.scalars().all()]

    async def mark_read(self, notification_id: str) -> NotificationResult | None:
        notification = await self.get_model(notification_id)
        if notification is None:
            return None
        notification.is_read = True
        notification = await self.save(notification)
        return _to_result(notification)

    async def delete_for_recipient(self, user_id: str) -> int:
        result = await self.db.execute(
            delete(Notification).where(Notification.sent_to_id == user_id)
        )
        return result.rowcount or 0
