"""Runtime settings for the classbook persistence layer."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_PATH = Path.cwd() / "classbook.db"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class Settings:
    """Settings shared by the connection provider and the services."""

    database_path: Path = DEFAULT_DB_PATH
    pool_size: int = 5
    pool_timeout: float = 30.0
    min_password_length: int = 8

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Environment variables:
            DATABASE_PATH: SQLite database file
            DB_POOL_SIZE: Maximum pooled connections
            DB_POOL_TIMEOUT: Seconds to wait for a pooled connection
            MIN_PASSWORD_LENGTH: Minimum length accepted for new passwords
        """
        return cls(
            database_path=Path(os.getenv("DATABASE_PATH", str(DEFAULT_DB_PATH))),
            pool_size=_int_env("DB_POOL_SIZE", 5),
            pool_timeout=_float_env("DB_POOL_TIMEOUT", 30.0),
            min_password_length=_int_env("MIN_PASSWORD_LENGTH", 8),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def set_settings(settings: Settings) -> None:
    global _settings
    _settings = settings


def reset_settings() -> None:
    global _settings
    _settings = None
