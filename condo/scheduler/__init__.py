"""Recurring task engine — schedules, job model and APScheduler lifecycle."""

from condo.scheduler.engine import TaskEngine
from condo.scheduler.models import Job
from condo.scheduler.schedules import JobSchedule, local_now

__all__ = [
    "Job",
    "JobSchedule",
    "TaskEngine",
    "local_now",
]
