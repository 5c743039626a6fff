"""Activity recorder: append-only audit trail with a global retention cap.

record() runs in its own session and transaction and never raises, so a
failed audit write cannot undo the business change that preceded it.
append() writes through the caller's session and takes part in the
caller's transaction; billing approval uses it so the audit entry commits
or rolls back together with the billing update. trim() enforces the cap
and is always a separate step after the insert has committed.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from officeflow.application.dtos.activity import ActivityResult
from officeflow.domain.enums import EXCLUDED_USER_ACTIONS, ActivityType
from officeflow.domain.value_objects.activity_details import ActivityDetails
from officeflow.infrastructure.persistence.repositories.activity_repo import (
    ActivityRepository,
)
from officeflow.infrastructure.persistence.repositories.user_repo import UserRepository
from officeflow.shared.logging import get_logger

logger = get_logger(__name__)


def _enum_value(value: Any) -> str:
    return getattr(value, "value", value)


def _details_dict(
    details: ActivityDetails | dict[str, Any] | None,
) -> dict[str, Any] | None:
    if details is None:
        return None
    if isinstance(details, ActivityDetails):
        return details.to_dict()
    return dict(details)


def _is_session_event(type: str, action: str) -> bool:
    return type == ActivityType.USER.value and action in EXCLUDED_USER_ACTIONS


class ActivityRecorder:
    """Implements IActivityRecorder over SQLAlchemy sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        db: AsyncSession | None = None,
        retention_limit: int = 500,
    ) -> None:
        self._session_factory = session_factory
        self._db = db
        self._retention_limit = retention_limit

    async def record(
        self,
        type: str,
        action: str,
        target: str,
        actor_id: str,
        details: ActivityDetails | dict[str, Any] | None = None,
    ) -> ActivityResult | None:
        """Insert one entry in its own transaction, then trim. Never raises."""
        type, action = _enum_value(type), _enum_value(action)
        if _is_session_event(type, action):
            return None
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    activity = await self._insert(
                        session, type, action, target, actor_id, details
                    )
        except Exception:
            logger.exception(
                "Failed to record activity %s/%s for actor %s", type, action, actor_id
            )
            return None
        if activity is not None:
            await self.trim()
        return activity

    async def append(
        self,
        type: str,
        action: str,
        target: str,
        actor_id: str,
        details: ActivityDetails | dict[str, Any] | None = None,
    ) -> ActivityResult | None:
        """Insert through the caller's session; the caller commits and then calls trim()."""
        if self._db is None:
            raise RuntimeError("ActivityRecorder.append requires a bound session")
        type, action = _enum_value(type), _enum_value(action)
        if _is_session_event(type, action):
            return None
        return await self._insert(self._db, type, action, target, actor_id, details)

    async def trim(self) -> int:
        """Delete the oldest entries beyond the retention limit. Never raises."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    repo = ActivityRepository(session)
                    excess = await repo.count() - self._retention_limit
                    if excess <= 0:
                        return 0
                    deleted = await repo.delete_oldest(excess)
        except Exception:
            logger.exception("Failed to trim activity log")
            return 0
        logger.debug("Trimmed %d activity entries", deleted)
        return deleted

    async def _insert(
        self,
        session: AsyncSession,
        type: str,
        action: str,
        target: str,
        actor_id: str,
        details: ActivityDetails | dict[str, Any] | None,
    ) -> ActivityResult | None:
        actor = await UserRepository(session).get_by_id(actor_id)
        if actor is None:
            logger.warning(
                "Skipping activity %s/%s: actor %s does not exist", type, action, actor_id
            )
            return None
        return await ActivityRepository(session).create(
            type=type,
            action=action,
            target=target,
            user_id=actor_id,
            details=_details_dict(details),
        )
