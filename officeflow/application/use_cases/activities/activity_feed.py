"""Activity feed query."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.activity import ActivityFeedQuery, ActivityResult

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import IActivityRepository


class ActivityFeed:
    """Newest-first activity listing with a hard page limit."""

    def __init__(
        self,
        db: AsyncSession,
        activity_repo: IActivityRepository,
        *,
        max_limit: int = 100,
    ) -> None:
        self.db = db
        self._repo = activity_repo
        self._max_limit = max_limit

    async def list(self, query: ActivityFeedQuery) -> list[ActivityResult]:
        query = replace(query, limit=max(1, min(query.limit, self._max_limit)))
        async with self.db.begin():
            return await self._repo.list_feed(query)
