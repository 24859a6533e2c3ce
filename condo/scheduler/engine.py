"""TaskEngine — APScheduler lifecycle and per-job isolation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from condo.config import settings
from condo.scheduler.models import JOB_FIRING, JOB_SCHEDULED, JOB_UNSCHEDULED
from condo.scheduler.schedules import local_now

if TYPE_CHECKING:
    from collections.abc import Sequence

    from condo.scheduler.models import Job

logger = logging.getLogger(__name__)

# A firing delayed longer than this (busy loop, suspended host) is dropped.
_MISFIRE_GRACE_SECONDS = 300


class TaskEngine:
    """Owns the recurring jobs and maps them onto APScheduler.

    Each firing goes through ``_run_job``, which logs and swallows handler
    exceptions so one failing job never affects the others, and which skips a
    firing while the same job is still running.

    Args:
        jobs: The jobs to schedule. Names must be unique.
        timezone: IANA timezone string (default from settings).
    """

    def __init__(self, jobs: Sequence[Job], timezone: str | None = None) -> None:
        self._jobs: dict[str, Job] = {}
        for job in jobs:
            if job.name in self._jobs:
                msg = f"Duplicate job name: {job.name}"
                raise ValueError(msg)
            self._jobs[job.name] = job
        self._timezone = timezone or settings.scheduler_timezone
        self._scheduler = AsyncIOScheduler(timezone=self._timezone)
        self._locks = {name: asyncio.Lock() for name in self._jobs}
        self._inflight: set[asyncio.Task] = set()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def timezone(self) -> str:
        return self._timezone

    def job_names(self) -> list[str]:
        return list(self._jobs)

    # -- Lifecycle -------------------------------------------------------------

    async def start(self) -> bool:
        """Schedule every job and start the scheduler.

        Returns True if this call started the engine, False if it was already
        running (nothing is scheduled twice).
        """
        if self._running:
            logger.debug("Task engine already running")
            return False
        # A shut down AsyncIOScheduler is not reused
        self._scheduler = AsyncIOScheduler(timezone=self._timezone)
        for job in self._jobs.values():
            self._add_job(job)
        self._scheduler.start()
        self._running = True
        logger.info(
            "Task engine started with %d job(s) (tz=%s)", len(self._jobs), self._timezone
        )
        for info in self.describe():
            logger.info(
                "  %s [%s] next run %s", info["name"], info["schedule"], info["next_run_at"]
            )
        return True

    async def stop(self) -> bool:
        """Unschedule every job and shut the scheduler down.

        Handlers already executing keep running to completion; only new
        firings are prevented.  Returns True if this call stopped the engine,
        False if it was not running.
        """
        if not self._running:
            return False
        self._scheduler.remove_all_jobs()
        self._scheduler.shutdown(wait=False)
        # shutdown() is deferred to the event loop; let it run before returning
        await asyncio.sleep(0)
        self._running = False
        logger.info("Task engine stopped")
        return True

    # -- Introspection ---------------------------------------------------------

    def state(self, name: str) -> str:
        """``unscheduled``, ``scheduled`` or ``firing`` for the named job."""
        if name not in self._jobs:
            msg = f"Unknown job: {name}"
            raise KeyError(msg)
        if self._locks[name].locked():
            return JOB_FIRING
        if self._running and self._scheduler.get_job(name) is not None:
            return JOB_SCHEDULED
        return JOB_UNSCHEDULED

    def describe(self) -> list[dict[str, Any]]:
        """Name, schedule, state and next fire time of every job.

        ``next_run_at`` is the live APScheduler value (``None`` while stopped);
        ``next_fire_at`` is computed from the schedule alone.
        """
        now = local_now(self._timezone)
        result = []
        for name, job in self._jobs.items():
            next_run = None
            if self._running:
                scheduled = self._scheduler.get_job(name)
                if scheduled is not None and scheduled.next_run_time is not None:
                    next_run = scheduled.next_run_time.isoformat()
            next_fire = job.schedule.next_fire_time(now, self._timezone)
            result.append(
                {
                    "name": name,
                    "description": job.description,
                    "schedule": job.schedule.describe(),
                    "state": self.state(name),
                    "next_run_at": next_run,
                    "next_fire_at": next_fire.isoformat() if next_fire else None,
                }
            )
        return result

    # -- Execution -------------------------------------------------------------

    async def run_job(self, name: str) -> bool:
        """Run a job now, outside its schedule. Returns True if it succeeded."""
        if name not in self._jobs:
            msg = f"Unknown job: {name}"
            raise KeyError(msg)
        return await self._run_job(name)

    async def _fire(self, name: str) -> None:
        """Callback invoked by APScheduler.

        The run is detached into its own task: APScheduler's asyncio executor
        cancels its pending futures on shutdown, and ``stop()`` must not abort
        a handler that is already executing.
        """
        task = asyncio.create_task(self._run_job(name), name=f"job:{name}")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run_job(self, name: str) -> bool:
        """Run one job invocation. Never raises."""
        job = self._jobs[name]
        lock = self._locks[name]
        if lock.locked():
            logger.warning("Job %s is still running, skipping this firing", name)
            return False

        async with lock:
            logger.info("Running job: %s", name)
            started = time.monotonic()
            try:
                result = await job.handler()
            except Exception:
                logger.exception("Job failed: %s", name)
                return False
            logger.info(
                "Job finished: %s in %.2fs (%s)", name, time.monotonic() - started, result
            )
            return True

    # -- Internal --------------------------------------------------------------

    def _add_job(self, job: Job):
        """Create the APScheduler job for *job*. Returns the APScheduler Job."""
        return self._scheduler.add_job(
            self._fire,
            trigger=job.schedule.to_trigger(self._timezone),
            id=job.name,
            name=job.name,
            args=[job.name],
            coalesce=True,
            max_instances=1,
            misfire_grace_time=_MISFIRE_GRACE_SECONDS,
            replace_existing=True,
        )
