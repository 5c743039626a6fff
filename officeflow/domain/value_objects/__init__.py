"""Domain value objects."""

from officeflow.domain.value_objects.activity_details import (
    ActivityDetails,
    BillingApprovedDetails,
    ClientNoteDetails,
    GuestClientPurgedDetails,
    TaskCommentedDetails,
    TaskCreatedDetails,
    TaskDeletedDetails,
    TaskReassignedDetails,
    TaskStatusChangedDetails,
    TaskSweptDetails,
    TaskUpdatedDetails,
    parse_activity_details,
)

__all__ = [
    "ActivityDetails",
    "BillingApprovedDetails",
    "ClientNoteDetails",
    "GuestClientPurgedDetails",
    "TaskCommentedDetails",
    "TaskCreatedDetails",
    "TaskDeletedDetails",
    "TaskReassignedDetails",
    "TaskStatusChangedDetails",
    "TaskSweptDetails",
    "TaskUpdatedDetails",
    "parse_activity_details",
]
