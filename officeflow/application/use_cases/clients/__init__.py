from officeflow.application.use_cases.clients.client_history import (
    ClientHistoryService,
)

__all__ = ["ClientHistoryService"]
