"""Tests for build_jobs — handler wiring onto the task engine."""

from datetime import date
from pathlib import Path

import pytest

from condo.backup import BackupOperator
from condo.jobs import build_jobs
from condo.scheduler.engine import TaskEngine
from condo.scheduler.schedules import (
    DAILY_BACKUP,
    EXPIRING_CONTRACTS,
    LOW_STOCK,
    MONTHLY_BILLING,
    OVERDUE_PAYMENTS,
)


@pytest.fixture
def backup(tmp_path: Path, db_path: Path) -> BackupOperator:
    return BackupOperator(db_path=db_path, backup_dir=tmp_path / "backups")


@pytest.fixture
def engine(repos, backup) -> TaskEngine:
    return TaskEngine(build_jobs(repos, backup, retention_days=7), timezone="America/Sao_Paulo")


def test_every_job_has_its_fixed_schedule(repos, backup) -> None:
    jobs = {job.name: job for job in build_jobs(repos, backup)}

    assert jobs["daily_backup"].schedule == DAILY_BACKUP
    assert jobs["overdue_payments"].schedule == OVERDUE_PAYMENTS
    assert jobs["expiring_contracts"].schedule == EXPIRING_CONTRACTS
    assert jobs["low_stock"].schedule == LOW_STOCK
    assert jobs["monthly_billing"].schedule == MONTHLY_BILLING
    assert all(job.description for job in jobs.values())


async def test_billing_job_through_engine(engine, seed, repos) -> None:
    condo = await seed.condominium()
    unit = await seed.unit(condo)

    assert await engine.run_job("monthly_billing") is True

    bills = await repos.payments.list_for_unit(unit.id)
    assert len(bills) == 1
    assert bills[0].due_date.day == 10


async def test_backup_job_through_engine(engine, seed, backup) -> None:
    await seed.condominium()

    assert await engine.run_job("daily_backup") is True
    assert len(backup.list_backups()) == 1


async def test_backup_job_failure_is_contained(tmp_path: Path, repos) -> None:
    missing = BackupOperator(db_path=tmp_path / "nope.db", backup_dir=tmp_path / "backups")
    engine = TaskEngine(build_jobs(repos, missing, retention_days=7), timezone="America/Sao_Paulo")

    assert await engine.run_job("daily_backup") is False
    assert await engine.run_job("low_stock") is True


async def test_overdue_job_through_engine(engine, seed, repos) -> None:
    condo = await seed.condominium()
    unit = await seed.unit(condo)
    # Long past due, so it is left alone regardless of today's date
    payment = await seed.payment(unit, date(2001, 1, 1))

    assert await engine.run_job("overdue_payments") is True
    assert (await repos.payments.get(payment.id)).status == "pending"


async def test_sweeps_through_engine_on_empty_database(engine, repos) -> None:
    assert await engine.run_job("expiring_contracts") is True
    assert await engine.run_job("low_stock") is True
    assert await repos.notifications.count() == 0
