"""Client history repository (append-only)."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.client import ClientHistoryCreate, ClientHistoryResult
from officeflow.infrastructure.persistence.models.client_history import ClientHistory
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.shared.utils.datetime import ensure_utc


def _to_result(h: ClientHistory) -> ClientHistoryResult:
    """Map ClientHistory ORM to ClientHistoryResult DTO."""
    return ClientHistoryResult(
        id=h.id,
        client_id=h.client_id,
        type=h.type,
        content=h.content,
        created_by_id=h.created_by_id,
        task_id=h.task_id,
        task_title=h.task_title,
        task_description=h.task_description,
        task_status=h.task_status,
        task_completed_date=ensure_utc(h.task_completed_date),
        task_billed_date=ensure_utc(h.task_billed_date),
        billing_details=h.billing_details,
        created_at=ensure_utc(h.created_at),
    )


class ClientHistoryRepository(BaseRepository[ClientHistory]):
    """Client history repository. Implements IClientHistoryRepository. No update or delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ClientHistory)

    async def create(self, data: ClientHistoryCreate) -> ClientHistoryResult:
        entry = ClientHistory(
            client_id=data.client_id,
            type=data.type,
            content=data.content,
            created_by_id=data.created_by_id,
            task_id=data.task_id,
            task_title=data.task_title,
            task_description=data.task_description,
            task_status=data.task_status,
            task_completed_date=data.task_completed_date,
            task_billed_date=data.task_billed_date,
            billing_details=data.billing_details,
        )
        entry = await self.add(entry)
        return _to_result(entry)

    async def list_by_client(self, client_id: str) -> list[ClientHistoryResult]:
        stmt = (
            select(ClientHistory)
            .where(ClientHistory.client_id == client_id)
            .order_by(ClientHistory.created_at.desc(), ClientHistory.id)
        )
        result = await self.db.execute(stmt)
        return [_to_result(h) for h in result.scalars().all()]

    async def list_task_history(self, client_id: str) -> list[ClientHistoryResult]:
        stmt = (
            select(ClientHistory)
            .where(
                ClientHistory.client_id == client_id,
                ClientHistory.task_id.is_not(None),
            )
            .order_by(
                ClientHistory.task_completed_date.desc(),
                ClientHistory.created_at.desc(),
            )
        )
        result = await self.db.execute(stmt)
        return [_to_result(h) for h in result.scalars().all()]

    async def count_for_task(self, task_id: str, history_type: str) -> int:
        stmt = select(func.count(ClientHistory.id)).where(
            ClientHistory.task_id == task_id,
            ClientHistory.type == history_type,
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def count_for_client(self, client_id: str, history_type: str) -> int:
        stmt = select(func.count(ClientHistory.id)).where(
            ClientHistory.client_id == client_id,
            ClientHistory.type == history_type,
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())
