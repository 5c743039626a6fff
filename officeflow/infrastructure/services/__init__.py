"""Infrastructure services that manage their own sessions (activity recording)."""

from officeflow.infrastructure.services.activity_recorder import ActivityRecorder

__all__ = ["ActivityRecorder"]
