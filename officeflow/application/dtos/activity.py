"""Activity DTOs (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ActivityResult:
    id: str
    type: str
    action: str
    target: str
    user_id: str
    details: dict[str, Any] | None
    created_at: datetime


@dataclass(frozen=True)
class ActivityFeedQuery:
    """Filters for the activity feed. Login/logout are hidden unless include_login_logout."""

    limit: int = 20
    type: str | None = None
    action: str | None = None
    user_id: str | None = None
    include_login_logout: bool = False
