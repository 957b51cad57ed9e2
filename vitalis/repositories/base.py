"""Shared repository plumbing.

Rows are never physically deleted; they carry a ``deleted`` flag. Every
read and every update in the repositories goes through :func:`active` so
soft-deleted rows stay invisible without each query repeating the filter.
"""
from __future__ import annotations

from sqlalchemy import ColumnElement, Select, Table, false, select, update

from vitalis.core.connection import PooledConnection


def active(table: Table) -> ColumnElement[bool]:
    """Predicate matching rows of ``table`` that are not soft-deleted."""
    return table.c.deleted == false()


class BaseRepository:
    """Binds a repository to one connection for the span of an operation.

    The repository neither commits nor releases: the connection's owner
    (an auto-commit block or a transaction scope) decides both.
    """

    table: Table

    def __init__(self, connection: PooledConnection):
        self.conn = connection

    def _select_active(self, *columns) -> Select:
        return select(*(columns or (self.table,))).where(active(self.table))

    def _update_active(self, row_id: int, values: dict) -> int:
        stmt = (
            update(self.table)
            .where(self.table.c.id == row_id, active(self.table))
            .values(**values)
        )
        return self.conn.execute(stmt).rowcount

    def _soft_delete_where(self, *criteria) -> int:
        stmt = update(self.table).where(*criteria).values(deleted=True)
        return self.conn.execute(stmt).rowcount
