"""Task API: thin routes delegating to the task use cases."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from officeflow.api.v1.dependencies import (
    CurrentUser,
    get_billing_approval_service,
    get_task_assignment_service,
    get_task_comment_service,
    get_task_edit_service,
)
from officeflow.application.dtos.task import TaskCreate
from officeflow.application.use_cases.tasks import (
    BillingApprovalService,
    TaskAssignmentService,
    TaskCommentService,
    TaskEditService,
)
from officeflow.core.limiter import limit_billing_approval, limit_writes
from officeflow.domain.enums import BillingStatus, TaskStatus
from officeflow.schemas.task import (
    BillingApprovalResponse,
    TaskAssignmentResponse,
    TaskCommentCreateRequest,
    TaskCommentResponse,
    TaskCreateRequest,
    TaskReassignRequest,
    TaskResponse,
    TaskStatusUpdateRequest,
    TaskUpdateRequest,
)

router = APIRouter()

AssignmentService = Annotated[
    TaskAssignmentService, Depends(get_task_assignment_service)
]
BillingService = Annotated[
    BillingApprovalService, Depends(get_billing_approval_service)
]
EditService = Annotated[TaskEditService, Depends(get_task_edit_service)]
CommentService = Annotated[TaskCommentService, Depends(get_task_comment_service)]


@router.post("", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    current_user: CurrentUser,
    service: AssignmentService,
):
    """Create a task (Admin or Partner). First assignee becomes the primary assignee."""
    task = await service.create_task(
        TaskCreate(
            title=body.title,
            description=body.description,
            status=body.status.value,
            priority=body.priority.value,
            due_date=body.due_date,
            assignee_ids=body.assignee_ids,
            client_id=body.client_id,
        ),
        actor=current_user,
    )
    return TaskResponse.model_validate(task)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    current_user: CurrentUser,
    service: AssignmentService,
    status: TaskStatus | None = None,
    billing_status: BillingStatus | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
):
    """List tasks visible to the current user, newest first."""
    tasks = await service.list_tasks(
        current_user,
        status=status.value if status else None,
        billing_status=billing_status.value if billing_status else None,
        skip=skip,
        limit=limit,
    )
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/pending-billing", response_model=list[TaskResponse])
async def list_pending_billing(
    current_user: CurrentUser,
    service: BillingService,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    """Admin queue of completed tasks awaiting billing approval."""
    tasks = await service.list_pending_billing(current_user, skip=skip, limit=limit)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    current_user: CurrentUser,
    service: AssignmentService,
):
    """Get one task (Admin, creator or assignee)."""
    task = await service.get_task(task_id, current_user)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdateRequest,
    current_user: CurrentUser,
    service: EditService,
):
    """Edit title, description, priority, due date or client (Admin or creator)."""
    task = await service.update_task(task_id, body.changes(), current_user)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
@limit_writes
async def delete_task(
    request: Request,
    task_id: str,
    current_user: CurrentUser,
    service: EditService,
):
    """Delete a task with its comments (Admin, Partner or creator)."""
    await service.delete_task(task_id, current_user)


@router.patch("/{task_id}/status", response_model=TaskResponse)
@limit_writes
async def update_task_status(
    request: Request,
    task_id: str,
    body: TaskStatusUpdateRequest,
    current_user: CurrentUser,
    service: BillingService,
):
    """Change task status. Completing a task moves it to pending billing."""
    task = await service.update_status(task_id, body.status.value, current_user)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}/reassign", response_model=TaskAssignmentResponse)
@limit_writes
async def reassign_task(
    request: Request,
    task_id: str,
    body: TaskReassignRequest,
    current_user: CurrentUser,
    service: AssignmentService,
):
    """Replace the task's assignee set. Partners may only reassign their own tasks."""
    result = await service.reassign(
        task_id, body.assignee_ids, current_user, note=body.note
    )
    return TaskAssignmentResponse(
        task_id=result.task_id,
        assignee_ids=result.assignee_ids,
        assigned_to_id=result.assigned_to_id,
        added=result.delta.to_add,
        removed=result.delta.to_remove,
    )


@router.post("/{task_id}/billing-approve", response_model=BillingApprovalResponse)
@limit_billing_approval
async def approve_billing(
    request: Request,
    task_id: str,
    current_user: CurrentUser,
    service: BillingService,
):
    """Approve billing for a pending_billing task (Admin only)."""
    result = await service.approve_billing(task_id, current_user)
    return BillingApprovalResponse.model_validate(result)


@router.post(
    "/{task_id}/comments", response_model=TaskCommentResponse, status_code=201
)
@limit_writes
async def add_task_comment(
    request: Request,
    task_id: str,
    body: TaskCommentCreateRequest,
    current_user: CurrentUser,
    service: CommentService,
):
    """Comment on a task; the creator and assignees are notified."""
    comment = await service.add_comment(task_id, body.content, current_user)
    return TaskCommentResponse.model_validate(comment)


@router.get("/{task_id}/comments", response_model=list[TaskCommentResponse])
async def list_task_comments(
    task_id: str,
    current_user: CurrentUser,
    service: CommentService,
):
    """Comments on a task, oldest first."""
    comments = await service.list_comments(task_id, current_user)
    return [TaskCommentResponse.model_validate(c) for c in comments]
