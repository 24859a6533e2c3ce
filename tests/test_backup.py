"""Tests for BackupOperator — dumps, retention and listing."""

import gzip
import os
import time
from pathlib import Path

import pytest

from condo.backup import BackupError, BackupOperator
from condo.models import Supplier
from condo.stores import SupplierStore


@pytest.fixture
async def operator(tmp_path: Path, db_path: Path) -> BackupOperator:
    # Touch the schema so there is something to dump
    await SupplierStore(db_path).add(Supplier(name="Acme Cleaning"))
    return BackupOperator(db_path=db_path, backup_dir=tmp_path / "backups")


def _age(path: Path, days: float) -> None:
    stamp = time.time() - days * 86400
    os.utime(path, (stamp, stamp))


def _fake_backup(directory: Path, name: str, age_days: float) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(b"x")
    _age(path, age_days)
    return path


# -- create_backup -------------------------------------------------------------


async def test_create_backup_writes_gzip_dump(operator: BackupOperator) -> None:
    path = await operator.create_backup()

    assert path.exists()
    assert path.parent == operator.backup_dir
    assert path.name.startswith("backup-")
    assert path.name.endswith(".sql.gz")
    with gzip.open(path, "rt", encoding="utf-8") as fh:
        dump = fh.read()
    assert "CREATE TABLE" in dump
    assert "Acme Cleaning" in dump


async def test_create_backup_twice_gives_distinct_files(operator: BackupOperator) -> None:
    first = await operator.create_backup()
    second = await operator.create_backup()
    assert first != second
    assert len(operator.list_backups()) == 2


async def test_create_backup_missing_database(tmp_path: Path) -> None:
    op = BackupOperator(db_path=tmp_path / "missing.db", backup_dir=tmp_path / "backups")
    with pytest.raises(BackupError, match="Database not found"):
        await op.create_backup()


# -- clean_old_backups ---------------------------------------------------------


async def test_clean_removes_only_expired_backups(tmp_path: Path) -> None:
    backups = tmp_path / "backups"
    old = _fake_backup(backups, "backup-2024-01-01T02-00-00-000000Z.sql.gz", age_days=10)
    recent = _fake_backup(backups, "backup-2024-01-08T02-00-00-000000Z.sql.gz", age_days=2)
    unrelated = _fake_backup(backups, "notes.txt", age_days=30)

    op = BackupOperator(db_path=tmp_path / "db.sqlite", backup_dir=backups)
    removed = await op.clean_old_backups(7)

    assert removed == 1
    assert not old.exists()
    assert recent.exists()
    assert unrelated.exists()


async def test_clean_nothing_to_remove(tmp_path: Path) -> None:
    backups = tmp_path / "backups"
    _fake_backup(backups, "backup-a.sql.gz", age_days=1)

    op = BackupOperator(db_path=tmp_path / "db.sqlite", backup_dir=backups)
    assert await op.clean_old_backups(7) == 0


async def test_clean_rejects_negative_retention(tmp_path: Path) -> None:
    op = BackupOperator(db_path=tmp_path / "db.sqlite", backup_dir=tmp_path)
    with pytest.raises(BackupError, match="Invalid backup retention"):
        await op.clean_old_backups(-1)


async def test_clean_missing_directory(tmp_path: Path) -> None:
    op = BackupOperator(db_path=tmp_path / "db.sqlite", backup_dir=tmp_path / "nope")
    with pytest.raises(BackupError, match="Backup directory not found"):
        await op.clean_old_backups(7)


# -- list_backups --------------------------------------------------------------


def test_list_backups_newest_first(tmp_path: Path) -> None:
    backups = tmp_path / "backups"
    _fake_backup(backups, "backup-old.sql.gz", age_days=5)
    _fake_backup(backups, "backup-new.sql.gz", age_days=1)
    _fake_backup(backups, "readme.md", age_days=0)

    op = BackupOperator(db_path=tmp_path / "db.sqlite", backup_dir=backups)
    listed = op.list_backups()
    assert [b.filename for b in listed] == ["backup-new.sql.gz", "backup-old.sql.gz"]
    assert listed[0].size == 1


def test_list_backups_missing_directory(tmp_path: Path) -> None:
    op = BackupOperator(db_path=tmp_path / "db.sqlite", backup_dir=tmp_path / "nope")
    assert op.list_backups() == []
