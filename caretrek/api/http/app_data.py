from contextlib import contextmanager
from dataclasses import dataclass

from caretrek.core.services import (
    DbManageService,
    DbSessionService,
    PersonManagementService,
    SchedulerService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    db_manage_service: DbManageService
    scheduler_service: SchedulerService

    @contextmanager
    def person_management(self):
        """Yield a ``PersonManagementService`` bound to a fresh session."""
        with self.database_service.session_scope() as session:
            yield PersonManagementService(session)
