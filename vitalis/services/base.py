"""Plumbing shared by the services."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from vitalis.core.connection import ConnectionSource
from vitalis.core.transaction import TransactionScope
from vitalis.utils.errors import (
    PersistenceError,
    TransactionError,
    ValidationError,
    conflict_from_integrity_error,
)

logger = logging.getLogger(__name__)


def require_text(value: Optional[str], label: str) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required")


class BaseService:
    def __init__(self, source: ConnectionSource):
        self.source = source

    def _transaction(self) -> TransactionScope:
        return TransactionScope(self.source.acquire())

    @staticmethod
    def _transaction_failure(exc: Exception, description: str) -> PersistenceError:
        """Pick the error to surface after a rolled-back transaction."""
        if isinstance(exc, PersistenceError):
            return exc
        if isinstance(exc, IntegrityError):
            conflict = conflict_from_integrity_error(exc)
            if conflict is not None:
                return conflict
        logger.error(f"Transaction failed while trying to {description}: {exc}")
        return TransactionError(f"Failed to {description}", cause=exc)
