"""Database and extension wiring for Finwise."""

from __future__ import annotations

from typing import Callable

from flask import Flask
from sqlmodel import Session, SQLModel, create_engine

from .config import BaseConfig

SessionFactory = Callable[[], Session]

_engine = None


def init_db(app: Flask) -> None:
    """Initialize the SQLModel engine using configuration from the app."""

    from . import models  # noqa: F401  # ensure tables are registered with SQLModel metadata

    config: BaseConfig = app.config["FINWISE_CONFIG"]
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())

    global _engine
    _engine = engine
    app.extensions["finwise_engine"] = engine

    SQLModel.metadata.create_all(engine)


def get_engine():
    """Return the initialized SQLModel engine."""

    if _engine is None:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Database engine not initialized")
    return _engine


def session_factory() -> Session:
    """Open a new session bound to the application engine.

    Repositories and services accept any callable with this signature so tests can
    hand in sessions bound to a throwaway engine instead.
    """

    return Session(get_engine(), expire_on_commit=False)
