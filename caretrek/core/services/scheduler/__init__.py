from .registry import ScheduledJob, registered_jobs, scheduled_job, unregister_job
from .service import SchedulerService

__all__ = [
    "ScheduledJob",
    "SchedulerService",
    "registered_jobs",
    "scheduled_job",
    "unregister_job",
]
