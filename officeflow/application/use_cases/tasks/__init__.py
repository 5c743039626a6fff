from officeflow.application.use_cases.tasks.billing_approval import (
    BillingApprovalService,
)
from officeflow.application.use_cases.tasks.task_assignment import (
    TaskAssignmentService,
    compute_delta,
    dedupe_ids,
)
from officeflow.application.use_cases.tasks.task_comments import TaskCommentService
from officeflow.application.use_cases.tasks.task_editing import TaskEditService

__all__ = [
    "BillingApprovalService",
    "TaskAssignmentService",
    "TaskCommentService",
    "TaskEditService",
    "compute_delta",
    "dedupe_ids",
]
