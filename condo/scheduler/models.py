"""Job data model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from condo.scheduler.schedules import JobSchedule

JOB_UNSCHEDULED = "unscheduled"
JOB_SCHEDULED = "scheduled"
JOB_FIRING = "firing"


@dataclass(frozen=True)
class Job:
    """A named recurring job.

    Attributes:
        name: Unique identifier, also used as the APScheduler job ID.
        schedule: When the job fires.
        handler: Zero-argument coroutine function doing the work.
        description: Human-readable summary for listings and logs.
    """

    name: str
    schedule: JobSchedule
    handler: Callable[[], Awaitable[object]]
    description: str = ""
