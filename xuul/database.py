"""Database engine and generic lookups by primary key."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import create_engine, func, inspect, select
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from xuul import config
from xuul.config import ConfigError

M = TypeVar("M")

MIN_CONNECTIONS = 5
MAX_CONNECTIONS = 20


def _env(key: str) -> str:
    value = config.get(key)
    if value is None:
        raise ConfigError(f"environment variable {key} is not set")
    return value


def database_url() -> str:
    """Build the PostgreSQL URL from the DB_* environment variables."""
    return "postgresql://{}:{}@{}:{}/{}".format(
        _env("DB_USERNAME"),
        _env("DB_PASSWORD"),
        _env("DB_HOST"),
        _env("DB_PORT"),
        _env("DB_DATABASE"),
    )


class Database:
    """A connection pool with helpers for primary-key lookups."""

    def __init__(self, url: str) -> None:
        options: dict[str, Any] = {}
        if make_url(url).get_backend_name() == "postgresql":
            options = {
                "pool_size": MIN_CONNECTIONS,
                "max_overflow": MAX_CONNECTIONS - MIN_CONNECTIONS,
            }
        self.engine = create_engine(url, **options)
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open a session that is closed on exit."""
        with self._sessions() as session:
            yield session

    def find_by_id(self, model: type[M], id: int) -> M | None:
        """Return the row of ``model`` with primary key ``id``, if any."""
        with self.session() as session:
            return session.get(model, id)

    def get_max_id(self, model: type) -> int | None:
        """Return the largest primary key of ``model``, or None for an empty table."""
        pk = inspect(model).primary_key[0]
        with self.session() as session:
            return session.scalar(select(func.max(pk)))