"""BackupOperator — compressed SQL dumps of the back office database.

Dumps are written as ``backup-<UTC timestamp>.sql.gz`` into the configured
backup directory and expired by modification time.  Directory scans and
deletions are synchronous; local file I/O is fast enough that wrapping each
call in ``asyncio.to_thread()`` isn't worth it.  Only the dump itself, which
reads the whole database, is moved off the event loop.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

import aiosqlite

from condo.config import settings

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup-"
BACKUP_SUFFIX = ".sql.gz"


class BackupError(RuntimeError):
    """A backup could not be created, listed or cleaned."""


@dataclass
class BackupFile:
    """A backup artifact found on disk."""

    filename: str
    path: Path
    size: int
    created_at: datetime


def _is_backup(path: Path) -> bool:
    name = path.name
    return path.is_file() and name.startswith(BACKUP_PREFIX) and name.endswith(BACKUP_SUFFIX)


def _write_gzip(path: Path, lines: list[str]) -> None:
    with gzip.open(path, "wt", encoding="utf-8") as fh:
        for line in lines:
            fh.write(f"{line}\n")


class BackupOperator:
    """Creates, lists and expires database dumps.

    Args:
        db_path: SQLite database to dump (default ``settings.database_path``).
        backup_dir: Directory holding the dumps (default ``settings.backup_dir``).
    """

    def __init__(self, db_path: Path | None = None, backup_dir: Path | None = None) -> None:
        self._db_path = db_path or settings.database_path
        self._backup_dir = backup_dir or settings.backup_dir

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    async def create_backup(self) -> Path:
        """Dump the database into a new compressed file. Returns its path."""
        timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        path = self._backup_dir / f"{BACKUP_PREFIX}{timestamp}{BACKUP_SUFFIX}"
        if not self._db_path.exists():
            msg = f"Database not found: {self._db_path}"
            raise BackupError(msg)

        logger.info("Starting database backup to %s", path)
        try:
            self._backup_dir.mkdir(parents=True, exist_ok=True)
            lines = await self._dump()
            await asyncio.to_thread(_write_gzip, path, lines)
        except (OSError, aiosqlite.Error) as exc:
            path.unlink(missing_ok=True)
            msg = f"Failed to create backup: {exc}"
            raise BackupError(msg) from exc

        logger.info("Backup completed: %s (%d statements)", path, len(lines))
        return path

    async def _dump(self) -> list[str]:
        db = await aiosqlite.connect(str(self._db_path))
        try:
            return [line async for line in db.iterdump()]
        finally:
            await db.close()

    async def clean_old_backups(self, retention_days: int) -> int:
        """Delete backups whose modification time is older than *retention_days*.

        Files that don't follow the backup naming scheme are left alone.
        Returns the number of files removed.
        """
        if retention_days < 0:
            msg = f"Invalid backup retention: {retention_days} days"
            raise BackupError(msg)
        if not self._backup_dir.is_dir():
            msg = f"Backup directory not found: {self._backup_dir}"
            raise BackupError(msg)

        logger.info("Removing backups older than %d days", retention_days)
        cutoff = datetime.now(UTC) - timedelta(days=retention_days)
        removed = 0
        try:
            for path in sorted(self._backup_dir.iterdir()):
                if not _is_backup(path):
                    continue
                mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
                if mtime < cutoff:
                    path.unlink()
                    removed += 1
                    logger.info("Old backup removed: %s", path)
        except OSError as exc:
            msg = f"Failed to clean old backups: {exc}"
            raise BackupError(msg) from exc

        logger.info("Backup cleanup finished, %d file(s) removed", removed)
        return removed

    def list_backups(self) -> list[BackupFile]:
        """Backups currently on disk, newest first."""
        if not self._backup_dir.is_dir():
            return []
        backups = []
        for path in self._backup_dir.iterdir():
            if not _is_backup(path):
                continue
            stat = path.stat()
            backups.append(
                BackupFile(
                    filename=path.name,
                    path=path,
                    size=stat.st_size,
                    created_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                )
            )
        backups.sort(key=lambda b: b.created_at, reverse=True)
        return backups
