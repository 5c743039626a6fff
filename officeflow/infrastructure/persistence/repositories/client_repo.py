"""Client repository."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.client import ClientResult
from officeflow.infrastructure.persistence.models.client import Client
from officeflow.infrastructure.persistence.repositories.base import BaseRepository
from officeflow.shared.utils.datetime import ensure_utc


def _to_result(c: Client) -> ClientResult:
    """Map Client ORM to ClientResult DTO."""
    return ClientResult(
        id=c.id,
        contact_person=c.contact_person,
        company_name=c.company_name,
        email=c.email,
        phone=c.phone,
        is_guest=c.is_guest,
        access_expiry=ensure_utc(c.access_expiry),
        manager_id=c.manager_id,
    )


class ClientRepository(BaseRepository[Client]):
    """Client repository. Implements IClientRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Client)

    async def get_by_id(self, client_id: str) -> ClientResult | None:
        client = await self.get_model(client_id)
        return _to_result(client) if client else None

    async def list_expired_guests(self, now: datetime) -> list[ClientResult]:
        stmt = (
            select(Client)
            .where(
                Client.is_guest.is_(True),
                Client.access_expiry.is_not(None),
                Client.access_expiry < now,
            )
            .order_by(Client.access_expiry)
        )
        result = await self.db.execute(stmt)
        return [_to_result(c) for c in result.scalars().all()]

    async def delete_client(self, client_id: str) -> bool:
        result = await self.db.execute(delete(Client).where(Client.id == client_id))
        return bool(result.rowcount)
