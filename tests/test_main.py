"""Tests for the condo-tasks command line."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from condo import main as cli
from condo.config import Settings


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    s = Settings(database_path=tmp_path / "condo.db", backup_dir=tmp_path / "backups")
    with patch.object(cli, "settings", s):
        yield s


def test_build_engine_wires_all_jobs(test_settings) -> None:
    engine = cli.build_engine()

    assert engine.job_names() == [
        "daily_backup",
        "overdue_payments",
        "expiring_contracts",
        "low_stock",
        "monthly_billing",
    ]
    assert engine.timezone == test_settings.scheduler_timezone
    assert engine.running is False


def test_jobs_command_lists_schedules(test_settings, capsys) -> None:
    assert cli.main(["jobs"]) == 0

    out = capsys.readouterr().out
    assert "daily_backup" in out
    assert "0 2 * * *" in out
    assert "0 7 * * sun" in out
    assert "0 1 1 * *" in out
    assert "America/Sao_Paulo" in out


def test_run_unknown_job(test_settings, capsys) -> None:
    assert cli.main(["run", "nope"]) == 2
    assert "Unknown job: nope" in capsys.readouterr().err


def test_run_job(test_settings) -> None:
    assert cli.main(["run", "low_stock"]) == 0
    assert test_settings.database_path.exists()


def test_run_failing_job_exit_code(test_settings) -> None:
    # No database yet, so the dump fails
    assert cli.main(["run", "daily_backup"]) == 1


def test_backups_command(test_settings, capsys) -> None:
    assert cli.main(["backups"]) == 0
    assert "No backups found." in capsys.readouterr().out

    test_settings.backup_dir.mkdir()
    (test_settings.backup_dir / "backup-2024-03-01T02-00-00-000000Z.sql.gz").write_bytes(b"x")
    (test_settings.backup_dir / "notes.txt").write_text("ignored")

    assert cli.main(["backups"]) == 0
    out = capsys.readouterr().out
    assert "backup-2024-03-01T02-00-00-000000Z.sql.gz" in out
    assert "notes.txt" not in out


async def test_serve_stops_engine_when_event_set(test_settings) -> None:
    engine = cli.build_engine()
    stop = asyncio.Event()

    task = asyncio.create_task(cli.serve(engine, stop))
    for _ in range(100):
        if engine.running:
            break
        await asyncio.sleep(0.01)
    assert engine.running is True
    assert {info["state"] for info in engine.describe()} == {"scheduled"}

    stop.set()
    await task
    assert engine.running is False


async def test_run_once(test_settings) -> None:
    engine = cli.build_engine()
    assert await cli.run_once(engine, "monthly_billing") is True
