"""Transaction scope around a single pooled connection."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from vitalis.core.connection import PooledConnection
from vitalis.utils.errors import DatabaseConnectionError, StateError

logger = logging.getLogger(__name__)


class TransactionScope:
    """Owns one connection for the length of a multi-statement operation.

    Usage::

        with TransactionScope(source.acquire()) as tx:
            tx.begin()
            ...
            tx.commit()

    Leaving the ``with`` block rolls back anything not committed, restores
    auto-commit and releases the connection, whatever the exit path.
    """

    def __init__(self, connection: PooledConnection):
        if connection is None:
            raise ValueError("connection must not be None")
        self._connection = connection
        self._active = False

    @property
    def connection(self) -> PooledConnection:
        return self._connection

    @property
    def active(self) -> bool:
        return self._active

    def begin(self) -> None:
        if self._connection.is_closed():
            raise StateError("Cannot begin transaction: connection is closed")
        try:
            self._connection.set_auto_commit(False)
        except DatabaseConnectionError as exc:
            raise StateError("Cannot begin transaction: connection unavailable", cause=exc) from exc
        self._active = True
        logger.debug("Transaction started")

    def commit(self) -> None:
        if self._connection.is_closed():
            raise StateError("Cannot commit: connection is closed")
        if not self._active:
            raise StateError("No active transaction to commit")
        self._connection.commit()
        self._active = False
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """Undo the current transaction.

        Failures are logged and swallowed: this runs on error paths, where
        raising would hide the error that caused the rollback.
        """
        if not self._active:
            return
        try:
            self._connection.rollback()
            logger.debug("Transaction rolled back")
        except SQLAlchemyError as exc:
            logger.error(f"Error during rollback: {exc}")
        finally:
            self._active = False

    def close(self) -> None:
        try:
            if self._active:
                self.rollback()
            if not self._connection.is_closed():
                self._connection.set_auto_commit(True)
        except (SQLAlchemyError, DatabaseConnectionError) as exc:
            logger.error(f"Error restoring auto-commit: {exc}")
        finally:
            try:
                self._connection.release()
            except SQLAlchemyError as exc:
                logger.error(f"Error releasing connection: {exc}")

    def __enter__(self) -> "TransactionScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
