"""Client history: list records and add general notes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.client import (
    ClientHistoryCreate,
    ClientHistoryResult,
    ClientResult,
)
from officeflow.application.dtos.user import UserResult
from officeflow.domain.enums import ActivityAction, ActivityType, ClientHistoryType
from officeflow.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from officeflow.domain.policies import can_manage_client_history
from officeflow.domain.value_objects.activity_details import ClientNoteDetails

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import (
        IClientHistoryRepository,
        IClientRepository,
    )
    from officeflow.application.interfaces.services import IActivityRecorder


class ClientHistoryService:
    """Reads client history and appends general notes."""

    def __init__(
        self,
        db: AsyncSession,
        client_repo: IClientRepository,
        history_repo: IClientHistoryRepository,
        activity_recorder: IActivityRecorder,
    ) -> None:
        self.db = db
        self._client_repo = client_repo
        self._history_repo = history_repo
        self._recorder = activity_recorder

    async def _require_client(self, client_id: str) -> ClientResult:
        client = await self._client_repo.get_by_id(client_id)
        if client is None:
            raise ResourceNotFoundException("client", client_id)
        return client

    @staticmethod
    def _check_access(actor: UserResult, action: str) -> None:
        if not can_manage_client_history(actor.role):
            raise AuthorizationException("client_history", action)

    async def list_history(
        self, client_id: str, actor: UserResult
    ) -> list[ClientHistoryResult]:
        """All records for the client, newest first."""
        self._check_access(actor, "read")
        async with self.db.begin():
            await self._require_client(client_id)
            return await self._history_repo.list_by_client(client_id)

    async def list_task_history(
        self, client_id: str, actor: UserResult
    ) -> list[ClientHistoryResult]:
        """Records that reference a task (billed work), newest completion first."""
        self._check_access(actor, "read")
        async with self.db.begin():
            await self._require_client(client_id)
            return await self._history_repo.list_task_history(client_id)

    async def add_note(
        self, client_id: str, content: str, actor: UserResult
    ) -> ClientHistoryResult:
        """Append a general note and record a client/updated activity."""
        self._check_access(actor, "create")
        content = (content or "").strip()
        if not content:
            raise ValidationException("Note content is required", field="content")
        async with self.db.begin():
            client = await self._require_client(client_id)
            entry = await self._history_repo.create(
                ClientHistoryCreate(
                    client_id=client_id,
                    type=ClientHistoryType.GENERAL.value,
                    content=content,
                    created_by_id=actor.id,
                )
            )
        await self._recorder.record(
            ActivityType.CLIENT.value,
            ActivityAction.UPDATED.value,
            client.company_name or client.contact_person,
            actor.id,
            ClientNoteDetails(client_id=client_id, history_id=entry.id),
        )
        return entry
