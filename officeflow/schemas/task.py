"""Task API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from officeflow.domain.enums import TaskPriority, TaskStatus


class TaskCreateRequest(BaseModel):
    """Request body for creating a task. The first assignee becomes the primary assignee."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    assignee_ids: list[str] = Field(default_factory=list)
    client_id: str | None = None


class TaskStatusUpdateRequest(BaseModel):
    """Request body for PATCH /tasks/{id}/status."""

    status: TaskStatus


class TaskReassignRequest(BaseModel):
    """Request body for PATCH /tasks/{id}/reassign. Order decides the primary assignee."""

    assignee_ids: list[str] = Field(default_factory=list)
    note: str | None = Field(default=None, max_length=2000)


class TaskResponse(BaseModel):
    """Task with its assignee ids."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None
    status: str
    priority: str
    due_date: datetime | None
    billing_status: str
    billing_date: datetime | None
    scheduled_deletion_date: datetime | None
    assigned_to_id: str | None
    assigned_by_id: str
    client_id: str | None
    assignee_ids: list[str]
    created_at: datetime
    updated_at: datetime


class TaskAssignmentResponse(BaseModel):
    """Result of a reassign call."""

    task_id: str
    assignee_ids: list[str]
    assigned_to_id: str | None
    added: list[str]
    removed: list[str]


class BillingApprovalResponse(BaseModel):
    """Result of a billing approval."""

    model_config = ConfigDict(from_attributes=True)

    task_id: str
    billing_status: str
    billing_date: datetime
    scheduled_deletion_date: datetime | None
    task_deleted: bool
    client_history_id: str | None


class TaskUpdateRequest(BaseModel):
    """Request body for PATCH /tasks/{id}. Only the fields sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    client_id: str | None = None

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if isinstance(data.get("priority"), TaskPriority):
            data["priority"] = data["priority"].value
        return data


class TaskCommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class TaskCommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    user_id: str | None
    user_name: str | None
    content: str
    created_at: datetime
