"""User repository. Users are provisioned by the identity provider; reads only."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.user import UserResult
from officeflow.infrastructure.persistence.models.user import User
from officeflow.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(u: User) -> UserResult:
    """Map User ORM to UserResult DTO."""
    return UserResult(
        id=u.id,
        name=u.name,
        email=u.email,
        role=u.role,
        is_active=u.is_active,
        phone=u.phone,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Implements IUserRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self.get_model(user_id)
        return _to_result(user) if user else None

    async def get_by_ids(self, user_ids: set[str]) -> list[UserResult]:
        if not user_ids:
            return []
        result = await self.db.execute(select(User).where(User.id.in_(user_ids)))
        return [_to_result(u) for u in result.scalars().all()]
