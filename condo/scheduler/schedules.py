"""Structured job schedules and the fixed schedule of each recurring job."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from apscheduler.triggers.cron import CronTrigger

from condo.config import settings

WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def local_now(timezone: str | None = None) -> datetime:
    """Current time in the scheduler's time zone."""
    return datetime.now(ZoneInfo(timezone or settings.scheduler_timezone))


def _field_matches(expected: int | str | None, actual: int) -> bool:
    if expected is None or expected == "*":
        return True
    return int(expected) == actual


@dataclass(frozen=True)
class JobSchedule:
    """A wall-clock trigger expressed as cron fields.

    ``None`` (or ``"*"``) means "every value" for that field, as in a crontab.
    ``day_of_week`` takes lowercase three-letter names (``"sun"``, ``"mon"``).
    ``timezone`` overrides the engine's zone when set.
    """

    minute: int | str | None = 0
    hour: int | str | None = None
    day: int | None = None
    day_of_week: str | None = None
    second: int | str | None = 0
    timezone: str | None = None

    def __post_init__(self) -> None:
        if self.day_of_week is not None and self.day_of_week not in WEEKDAYS:
            msg = f"Invalid day_of_week: {self.day_of_week!r}"
            raise ValueError(msg)

    def zone(self, default: str | None = None) -> str:
        return self.timezone or default or settings.scheduler_timezone

    def to_trigger(self, timezone: str | None = None) -> CronTrigger:
        """Build the APScheduler trigger for this schedule."""
        fields = {
            "second": self.second,
            "minute": self.minute,
            "hour": self.hour,
            "day": self.day,
            "day_of_week": self.day_of_week,
        }
        cron_kwargs = {k: v for k, v in fields.items() if v is not None}
        return CronTrigger(timezone=self.zone(timezone), **cron_kwargs)

    def next_fire_time(self, after: datetime, timezone: str | None = None) -> datetime | None:
        """First firing strictly after *after*, in the schedule's zone."""
        return self.to_trigger(timezone).get_next_fire_time(None, after + timedelta(microseconds=1))

    def matches(self, moment: datetime, timezone: str | None = None) -> bool:
        """Whether the schedule fires at *moment* (compared in the schedule's zone)."""
        local = moment.astimezone(ZoneInfo(self.zone(timezone)))
        if self.day_of_week is not None and WEEKDAYS[local.weekday()] != self.day_of_week:
            return False
        return (
            _field_matches(self.day, local.day)
            and _field_matches(self.hour, local.hour)
            and _field_matches(self.minute, local.minute)
            and _field_matches(self.second, local.second)
        )

    def describe(self) -> str:
        """Crontab-style rendering, e.g. ``"0 7 * * sun"``."""
        parts = (self.minute, self.hour, self.day, None, self.day_of_week)
        return " ".join("*" if p is None else str(p) for p in parts)


DAILY_BACKUP = JobSchedule(hour=2)
OVERDUE_PAYMENTS = JobSchedule(hour=5)
EXPIRING_CONTRACTS = JobSchedule(hour=7, day_of_week="sun")
LOW_STOCK = JobSchedule(hour=8, day_of_week="mon")
MONTHLY_BILLING = JobSchedule(hour=1, day=1)
