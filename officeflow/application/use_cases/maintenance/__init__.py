from officeflow.application.use_cases.maintenance.guest_client_purge import (
    GuestClientPurge,
)
from officeflow.application.use_cases.maintenance.task_deletion_sweeper import (
    TaskDeletionSweeper,
)

__all__ = ["GuestClientPurge", "TaskDeletionSweeper"]
