"""Task engine entry point.

Usage examples:
    # Run the engine until SIGINT/SIGTERM
    condo-tasks serve

    # Show the jobs and when they fire next
    condo-tasks jobs

    # Trigger one job immediately
    condo-tasks run monthly_billing

    # List backup files
    condo-tasks backups
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from condo.backup import BackupOperator
from condo.config import settings
from condo.jobs import build_jobs
from condo.scheduler.engine import TaskEngine
from condo.stores import Repositories

logger = logging.getLogger(__name__)


def build_engine() -> TaskEngine:
    """Wire repositories, backup operator and jobs from settings."""
    repos = Repositories.open(settings.database_path)
    backup = BackupOperator(settings.database_path, settings.backup_dir)
    jobs = build_jobs(repos, backup, settings.backup_retention_days)
    return TaskEngine(jobs, timezone=settings.scheduler_timezone)


async def serve(engine: TaskEngine, stop_event: asyncio.Event | None = None) -> None:
    """Start the engine and keep it running until *stop_event* is set.

    Without an explicit event, SIGINT and SIGTERM set it.
    """
    if stop_event is None:
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop_event.set)

    await engine.start()
    try:
        await stop_event.wait()
        logger.info("Shutdown requested")
    finally:
        await engine.stop()


async def run_once(engine: TaskEngine, name: str) -> bool:
    """Run a single job through the engine wrapper."""
    return await engine.run_job(name)


def _print_jobs(engine: TaskEngine) -> None:
    for info in engine.describe():
        print(
            f"{info['name']:<20} {info['schedule']:<14} "
            f"{info['next_fire_at'] or '-':<27} {info['description']}"
        )
    print(f"(timezone: {engine.timezone})")


def _print_backups() -> None:
    backups = BackupOperator(settings.database_path, settings.backup_dir).list_backups()
    if not backups:
        print("No backups found.")
        return
    for b in backups:
        print(f"{b.created_at.isoformat()}  {b.size:>12}  {b.filename}")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="condo-tasks", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Run the scheduler until interrupted (default)")
    sub.add_parser("jobs", help="List jobs and their schedules")
    run = sub.add_parser("run", help="Run one job now")
    run.add_argument("job", help="Job name (see 'jobs')")
    sub.add_parser("backups", help="List backup files")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )
    args = _parse_args(argv)
    command = args.command or "serve"

    if command == "backups":
        _print_backups()
        return 0

    engine = build_engine()
    if command == "jobs":
        _print_jobs(engine)
        return 0

    if command == "run":
        if args.job not in engine.job_names():
            print(f"Unknown job: {args.job}", file=sys.stderr)
            return 2
        ok = asyncio.run(run_once(engine, args.job))
        return 0 if ok else 1

    logger.info(
        "Starting task engine (tz=%s, db=%s)", settings.scheduler_timezone, settings.database_path
    )
    asyncio.run(serve(engine))
    return 0


if __name__ == "__main__":
    sys.exit(main())
