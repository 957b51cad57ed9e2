"""Pooled connection source.

:class:`ConnectionSource` wraps a SQLAlchemy engine backed by a
``QueuePool`` and hands out :class:`PooledConnection` objects. Each
connection is exclusively owned by the operation that acquired it and must
be released back to the pool on every exit path; use
:meth:`ConnectionSource.connection` or a
:class:`~vitalis.core.transaction.TransactionScope` to get that for free.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError

from vitalis.core.database import create_db_engine
from vitalis.utils.errors import DatabaseConnectionError, PoolExhaustedError

logger = logging.getLogger(__name__)

AUTOCOMMIT = "AUTOCOMMIT"


class PooledConnection:
    """A live connection checked out of the pool.

    Starts in auto-commit mode: every statement is committed as it runs.
    Turning auto-commit off makes statements accumulate in a transaction
    until :meth:`commit` or :meth:`rollback`.
    """

    def __init__(self, connection: Connection):
        self._connection = connection
        self._auto_commit = False
        self.set_auto_commit(True)

    @property
    def auto_commit(self) -> bool:
        return self._auto_commit

    def set_auto_commit(self, enabled: bool) -> None:
        if self.is_closed():
            raise DatabaseConnectionError("Connection is closed")
        if enabled == self._auto_commit:
            return
        # The isolation level cannot change inside a transaction. Anything
        # still pending here is discarded, never committed implicitly.
        if self._connection.in_transaction():
            self._connection.rollback()
        if enabled:
            self._connection.execution_options(isolation_level=AUTOCOMMIT)
        else:
            self._connection.execution_options(
                isolation_level=self._connection.default_isolation_level
            )
        self._auto_commit = enabled

    def execute(self, statement, parameters: Optional[Mapping[str, Any]] = None) -> CursorResult:
        return self._connection.execute(statement, parameters or {})

    def commit(self) -> None:
        self._connection.commit()

    def rollback(self) -> None:
        self._connection.rollback()

    def is_closed(self) -> bool:
        return self._connection.closed or self._connection.invalidated

    def release(self) -> None:
        """Return the connection to the pool. Safe to call more than once."""
        if not self._connection.closed:
            self._connection.close()


class ConnectionSource:
    """Bounded pool of database connections with acquire/release semantics."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings) -> "ConnectionSource":
        engine = create_db_engine(settings)
        logger.info(
            f"Connection pool ready (size={settings.DATABASE_POOL_SIZE}, "
            f"max_overflow={settings.DATABASE_MAX_OVERFLOW})"
        )
        return cls(engine)

    def acquire(self) -> PooledConnection:
        """Check a connection out of the pool.

        Blocks while the pool is saturated, up to the configured pool
        timeout.

        Raises:
            PoolExhaustedError: the wait bound elapsed.
            DatabaseConnectionError: the database could not be reached.
        """
        try:
            connection = self.engine.connect()
        except PoolTimeoutError as exc:
            logger.error(f"Connection pool exhausted: {exc}")
            raise PoolExhaustedError("No database connection available", cause=exc) from exc
        except SQLAlchemyError as exc:
            logger.error(f"Failed to acquire database connection: {exc}")
            raise DatabaseConnectionError("Could not connect to the database", cause=exc) from exc

        try:
            return PooledConnection(connection)
        except SQLAlchemyError as exc:
            connection.close()
            logger.error(f"Failed to prepare database connection: {exc}")
            raise DatabaseConnectionError("Could not prepare the database connection", cause=exc) from exc

    @contextmanager
    def connection(self) -> Iterator[PooledConnection]:
        """Acquire an auto-commit connection for the duration of a block."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            conn.release()

    def ping(self) -> bool:
        with self.connection() as conn:
            try:
                conn.execute(text("SELECT 1")).scalar()
            except SQLAlchemyError as exc:
                raise DatabaseConnectionError("Database did not answer", cause=exc) from exc
        return True

    def dispose(self) -> None:
        """Close every pooled connection. Call at shutdown."""
        self.engine.dispose()
        logger.info("Connection pool disposed")
