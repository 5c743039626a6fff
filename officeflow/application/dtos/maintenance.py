"""DTOs for scheduled cleanup runs."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SweepResult:
    """Billed tasks deleted after their grace window."""

    deleted_task_ids: list[str] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted_task_ids)


@dataclass(frozen=True)
class GuestPurgeResult:
    """Expired guest clients removed, kept for their billing history, or failed.

    Failed ids are logged and left for the next run.
    """

    deleted_client_ids: list[str] = field(default_factory=list)
    retained_client_ids: list[str] = field(default_factory=list)
    failed_client_ids: list[str] = field(default_factory=list)
