"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a whole number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Finwise"
    DB_FILENAME = "finwise.db"
    PLACEHOLDER_SECRET = "replace-me"
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("FINWISE_SECRET_KEY", self.PLACEHOLDER_SECRET)
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("FINWISE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("FINWISE_DATABASE_URL", self._build_sqlite_url())
        self.SURFACE_UNKNOWN_CATEGORIES = _env_bool(
            "FINWISE_SURFACE_UNKNOWN_CATEGORIES", default=False
        )
        self.CURRENCY_SYMBOL = os.getenv("FINWISE_CURRENCY_SYMBOL", "$")
        self.PERMANENT_SESSION_LIFETIME = timedelta(days=_env_int("FINWISE_REMEMBER_DAYS", 30))
        if not self.DEV_MODE and self.SECRET_KEY == self.PLACEHOLDER_SECRET:
            raise ValueError("FINWISE_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("FINWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; callers point DATA_DIR at a temp dir."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
