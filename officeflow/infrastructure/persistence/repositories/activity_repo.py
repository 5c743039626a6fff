"""Activity repository: inserts, retention trimming and the feed query."""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.activity import ActivityFeedQuery, ActivityResult
from officeflow.domain.enums import EXCLUDED_USER_ACTIONS
from officeflow.infrastructure.persistence.models.activity import Activity
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.shared.utils.datetime import ensure_utc


def _to_result(a: Activity) -> ActivityResult:
    """Map Activity ORM to ActivityResult DTO."""
    return ActivityResult(
        id=a.id,
        type=a.type,
        action=a.action,
        target=a.target,
        user_id=a.user_id,
        details=a.details,
        created_at=ensure_utc(a.created_at),
    )


class ActivityRepository(BaseRepository[Activity]):
    """Activity repository. Implements IActivityRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Activity)

    async def create(
        self,
        type: str,
        action: str,
        target: str,
        user_id: str,
        details: dict[str, Any] | None = None,
    ) -> ActivityResult:
        activity = Activity(
            type=type,
            action=action,
            target=target,
            user_id=user_id,
            details=details,
        )
        activity = await self.add(activity)
        return _to_result(activity)

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Activity.id)))
        return int(result.scalar_one())

    async def delete_oldest(self, count: int) -> int:
        if count <= 0:
            return 0
        oldest = (
            select(Activity.id)
            .order_by(Activity.created_at.asc(), Activity.id.asc())
            .limit(count)
        )
        ids = list((await self.db.execute(oldest)).scalars().all())
        if not ids:
            return 0
        result = await self.db.execute(delete(Activity).where(Activity.id.in_(ids)))
        return result.rowcount or 0

    async def list_feed(self, query: ActivityFeedQuery) -> list[ActivityResult]:
        stmt = select(Activity)
        if query.type:
            stmt = stmt.where(Activity.type == query.type)
        if query.action:
            stmt = stmt.where(Activity.action == query.action)
        elif not query.include_login_logout:
            # Session events stay out of the feed unless asked for by action.
            stmt = stmt.where(Activity.action.not_in(sorted(EXCLUDED_USER_ACTIONS)))
        if query.user_id:
            stmt = stmt.where(Activity.user_id == query.user_id)
        stmt = stmt.order_by(Activity.created_at.desc(), Activity.id.desc()).limit(
            query.limit
        )
        result = await self.db.execute(stmt)
        return [_to_result(a) for a in result.scalars().all()]
