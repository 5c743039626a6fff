"""Client history API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from officeflow.api.v1.dependencies import CurrentUser, get_client_history_service
from officeflow.application.use_cases.clients import ClientHistoryService
from officeflow.core.limiter import limit_writes
from officeflow.schemas.client import ClientHistoryResponse, ClientNoteRequest

router = APIRouter()

HistoryService = Annotated[ClientHistoryService, Depends(get_client_history_service)]


@router.get("/{client_id}/history", response_model=list[ClientHistoryResponse])
async def list_client_history(
    client_id: str,
    current_user: CurrentUser,
    service: HistoryService,
):
    """All history records for the client, newest first."""
    entries = await service.list_history(client_id, current_user)
    return [ClientHistoryResponse.model_validate(e) for e in entries]


@router.post(
    "/{client_id}/history", response_model=ClientHistoryResponse, status_code=201
)
@limit_writes
async def add_client_note(
    request: Request,
    client_id: str,
    body: ClientNoteRequest,
    current_user: CurrentUser,
    service: HistoryService,
):
    """Append a general note to the client's history."""
    entry = await service.add_note(client_id, body.content, current_user)
    return ClientHistoryResponse.model_validate(entry)


@router.get("/{client_id}/task-history", response_model=list[ClientHistoryResponse])
async def list_client_task_history(
    client_id: str,
    current_user: CurrentUser,
    service: HistoryService,
):
    """Billed task records for the client; they outlive the deleted tasks."""
    entries = await service.list_task_history(client_id, current_user)
    return [ClientHistoryResponse.model_validate(e) for e in entries]
