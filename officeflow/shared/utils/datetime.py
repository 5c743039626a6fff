"""UTC datetime helpers.

Billing dates, deletion schedules and activity timestamps are timezone-aware
UTC. SQLite hands back naive values, so repositories pass every datetime they
read through ensure_utc.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Treat naive values as UTC and convert aware ones to UTC; None passes through."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
