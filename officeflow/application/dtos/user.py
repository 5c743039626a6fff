"""User DTOs (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """Acting or referenced user."""

    id: str
    name: str
    email: str
    role: str
    is_active: bool
    phone: str | None = None
