"""Core services exports."""

from .database.db_manage import DbManageService
from .database.db_session import DbSessionService
from .person.person_management import PersonManagementService
from .scheduler import SchedulerService, scheduled_job

__all__ = [
    "DbManageService",
    "DbSessionService",
    "PersonManagementService",
    "SchedulerService",
    "scheduled_job",
]
