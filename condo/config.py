"""Task engine settings loaded from environment variables (and `.env` outside tests)."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Back office task engine configuration. All values come from environment variables."""

    # Database
    database_path: Path = Field(default=Path("data/condo.db"))

    # Scheduler (all job schedules are evaluated in this zone)
    scheduler_timezone: str = Field(default="America/Sao_Paulo")

    # Backups
    backup_dir: Path = Field(default=Path("backups"))
    backup_retention_days: int = Field(default=7, ge=0)

    # Notifications
    currency_symbol: str = Field(default="R$")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @field_validator("scheduler_timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown timezone: {value}"
            raise ValueError(msg) from exc
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)


settings = Settings()
