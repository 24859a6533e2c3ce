"""Tests for Settings configuration model."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from condo.config import Settings


class TestDefaults:
    def test_scheduler_timezone(self):
        assert Settings().scheduler_timezone == "America/Sao_Paulo"

    def test_backup_defaults(self):
        s = Settings()
        assert s.backup_dir == Path("backups")
        assert s.backup_retention_days == 7

    def test_currency_symbol(self):
        assert Settings().currency_symbol == "R$"


class TestValidation:
    def test_retention_zero_allowed(self):
        assert Settings(backup_retention_days=0).backup_retention_days == 0

    def test_negative_retention_rejected(self):
        with pytest.raises(ValidationError):
            Settings(backup_retention_days=-1)

    def test_paths_coerced(self):
        s = Settings(database_path="var/db.sqlite", backup_dir="/tmp/dumps")
        assert s.database_path == Path("var/db.sqlite")
        assert s.backup_dir == Path("/tmp/dumps")


def test_environment_ignored_under_pytest(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SCHEDULER_TIMEZONE", "Europe/Lisbon")
    assert Settings().scheduler_timezone == "America/Sao_Paulo"


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError, match="Unknown timezone"):
        Settings(scheduler_timezone="Mars/Olympus_Mons")
