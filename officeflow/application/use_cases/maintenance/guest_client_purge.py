"""Remove guest clients whose access has expired."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.application.dtos.client import ClientResult
from officeflow.application.dtos.maintenance import GuestPurgeResult
from officeflow.domain.enums import ActivityAction, ActivityType, ClientHistoryType
from officeflow.domain.value_objects.activity_details import GuestClientPurgedDetails
from officeflow.shared.logging import get_logger
from officeflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from officeflow.application.interfaces.repositories import (
        IClientHistoryRepository,
        IClientRepository,
        ITaskRepository,
    )
    from officeflow.application.interfaces.services import IActivityRecorder

logger = get_logger(__name__)


class GuestClientPurge:
    """Deletes guest clients with access_expiry < now, one transaction per client.

    Tasks of a purged client are kept and detached (client_id cleared). A
    guest that owns task_completed history is retained, since deleting the
    client would cascade to billing records that must outlive it. A client
    that fails to delete is logged and retried on the next run. The client's
    manager gets a system/auto_deleted activity entry.
    """

    def __init__(
        self,
        db: AsyncSession,
        client_repo: IClientRepository,
        task_repo: ITaskRepository,
        history_repo: IClientHistoryRepository,
        activity_recorder: IActivityRecorder | None = None,
    ) -> None:
        self.db = db
        self._client_repo = client_repo
        self._task_repo = task_repo
        self._history_repo = history_repo
        self._recorder = activity_recorder

    async def run(self, now: datetime | None = None) -> GuestPurgeResult:
        now = now or utc_now()
        async with self.db.begin():
            expired = await self._client_repo.list_expired_guests(now)

        purged: list[ClientResult] = []
        retained: list[str] = []
        failed: list[str] = []
        for client in expired:
            try:
                async with self.db.begin():
                    billed = await self._history_repo.count_for_client(
                        client.id, ClientHistoryType.TASK_COMPLETED.value
                    )
                    if not billed:
                        await self._task_repo.detach_client(client.id)
                        await self._client_repo.delete_client(client.id)
            except Exception:
                logger.exception("Failed to delete expired guest client %s", client.id)
                failed.append(client.id)
                continue
            if billed:
                logger.warning(
                    "Kept expired guest client %s: %d task_completed record(s)",
                    client.id,
                    billed,
                )
                retained.append(client.id)
                continue
            purged.append(client)
            logger.info("Deleted expired guest client %s", client.id)

        for client in purged:
            await self._record(client)
        return GuestPurgeResult(
            deleted_client_ids=[c.id for c in purged],
            retained_client_ids=retained,
            failed_client_ids=failed,
        )

    async def _record(self, client: ClientResult) -> None:
        if self._recorder is None or not client.manager_id:
            return
        await self._recorder.record(
            ActivityType.SYSTEM.value,
            ActivityAction.AUTO_DELETED.value,
            f"Guest client {client.company_name or client.contact_person}",
            client.manager_id,
            GuestClientPurgedDetails(
                client_id=client.id,
                expired_on=client.access_expiry,
                client_email=client.email,
                client_phone=client.phone,
            ),
        )
