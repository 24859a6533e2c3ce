"""The recurring back office jobs and their wiring into ``Job`` values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from condo.config import settings
from condo.jobs.backup import run_daily_backup
from condo.jobs.billing import generate_monthly_bills
from condo.jobs.contracts import sweep_expiring_contracts
from condo.jobs.inventory import sweep_low_stock
from condo.jobs.overdue import SweepResult, sweep_overdue_payments
from condo.scheduler.models import Job
from condo.scheduler.schedules import (
    DAILY_BACKUP,
    EXPIRING_CONTRACTS,
    LOW_STOCK,
    MONTHLY_BILLING,
    OVERDUE_PAYMENTS,
)

if TYPE_CHECKING:
    from condo.backup import BackupOperator
    from condo.stores import Repositories


def build_jobs(
    repos: Repositories,
    backup: BackupOperator,
    retention_days: int | None = None,
) -> list[Job]:
    """Bind every handler to its dependencies and fixed schedule."""
    retention = settings.backup_retention_days if retention_days is None else retention_days

    async def daily_backup() -> int:
        return await run_daily_backup(backup, retention)

    async def overdue_payments() -> SweepResult:
        return await sweep_overdue_payments(repos)

    async def expiring_contracts() -> int:
        return await sweep_expiring_contracts(repos)

    async def low_stock() -> int:
        return await sweep_low_stock(repos)

    async def monthly_billing() -> int:
        return await generate_monthly_bills(repos)

    return [
        Job("daily_backup", DAILY_BACKUP, daily_backup, "Database dump and retention cleanup"),
        Job("overdue_payments", OVERDUE_PAYMENTS, overdue_payments, "Overdue payment sweep"),
        Job(
            "expiring_contracts",
            EXPIRING_CONTRACTS,
            expiring_contracts,
            "Contract expiry warnings",
        ),
        Job("low_stock", LOW_STOCK, low_stock, "Low inventory warnings"),
        Job("monthly_billing", MONTHLY_BILLING, monthly_billing, "Monthly condominium bills"),
    ]


__all__ = [
    "build_jobs",
    "generate_monthly_bills",
    "run_daily_backup",
    "sweep_expiring_contracts",
    "sweep_low_stock",
    "sweep_overdue_payments",
]
