"""Database handle: engine construction, schema setup, and transactions.

Each service receives a ``Database`` at construction and opens one
transaction per operation. Driver errors leave this module only as
``StoreFailure``.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import contextmanager

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from shared.config import Settings
from shared.errors import StoreFailure
from shared.logging import get_logger
from shared.schema import metadata

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(settings: Settings) -> Engine:
    """Build an engine whose every round-trip is bounded by ``db_timeout_seconds``."""
    url = sa.engine.make_url(settings.database_url)
    timeout = settings.db_timeout_seconds
    kwargs: dict = {"pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"timeout": timeout, "check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout_seconds,
        )
        if url.get_backend_name() == "postgresql":
            kwargs["connect_args"] = {
                "connect_timeout": max(1, math.ceil(timeout)),
                "options": f"-c statement_timeout={int(timeout * 1000)}",
            }

    engine = sa.create_engine(url, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """Explicit store handle shared by all stores and services."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls(create_store_engine(settings))

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Run the enclosed statements atomically.

        Commits on normal exit, rolls back on any exception. Domain errors
        propagate unchanged; driver errors become ``StoreFailure``.
        """
        try:
            with self.engine.begin() as conn:
                yield conn
        except (SQLAlchemyError, OverflowError) as exc:
            # OverflowError: a Python int the driver cannot bind
            logger.error("store_failure", error_type=type(exc).__name__, error=str(exc))
            raise StoreFailure() from exc

    def ping(self) -> None:
        with self.transaction() as conn:
            conn.execute(sa.text("SELECT 1"))

    def setup(self) -> None:
        """Create all tables."""
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreFailure() from exc
        logger.info("schema_created", tables=sorted(metadata.tables))

    def drop(self) -> None:
        """Drop all tables."""
        try:
            metadata.drop_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreFailure() from exc
        logger.info("schema_dropped", tables=sorted(metadata.tables))

    def dispose(self) -> None:
        self.engine.dispose()
