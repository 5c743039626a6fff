"""Sweep billed tasks past their deletion date, then purge expired guest clients.

Usage:
    python -m scripts.run_scheduled_cleanup [system_actor_id]

With system_actor_id, each swept task gets a system/auto_deleted activity
under that user. Guest purges are recorded under the client's manager.
Meant for cron (e.g. hourly).
"""

import asyncio
import sys

from officeflow.application.use_cases.maintenance import (
    GuestClientPurge,
    TaskDeletionSweeper,
)
from officeflow.core.config import get_settings
from officeflow.domain.exceptions import SqlNotConfiguredException
from officeflow.infrastructure.persistence.database import (
    dispose_engine,
    get_session_factory,
)
from officeflow.infrastructure.persistence.repositories import (
    ClientHistoryRepository,
    ClientRepository,
    TaskRepository,
)
from officeflow.infrastructure.services import ActivityRecorder
from officeflow.shared.logging import setup_logging
from officeflow.shared.utils.datetime import utc_now


async def main() -> None:
    """Both jobs use the same 'now'."""
    settings = get_settings()
    setup_logging()
    try:
        session_factory = get_session_factory()
    except SqlNotConfiguredException as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)

    system_actor_id = sys.argv[1] if len(sys.argv) > 1 else None
    recorder = ActivityRecorder(
        session_factory, retention_limit=settings.activity_retention_limit
    )
    now = utc_now()

    try:
        async with session_factory() as session:
            sweep = await TaskDeletionSweeper(
                session,
                TaskRepository(session),
                recorder,
                system_actor_id=system_actor_id,
            ).run(now)
        print(f"Swept {sweep.deleted_count} billed task(s)")

        async with session_factory() as session:
            purge = await GuestClientPurge(
                session,
                ClientRepository(session),
                TaskRepository(session),
                ClientHistoryRepository(session),
                recorder,
            ).run(now)
        print(f"Deleted {len(purge.deleted_client_ids)} expired guest client(s)")
        if purge.retained_client_ids:
            print(
                f"Kept {len(purge.retained_client_ids)} expired guest client(s) "
                "with billing history"
            )
        if purge.failed_client_ids:
            print(
                f"Failed to delete {len(purge.failed_client_ids)} client(s): "
                f"{', '.join(purge.failed_client_ids)}",
                file=sys.stderr,
            )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
