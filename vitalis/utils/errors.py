"""Error taxonomy for the persistence layer.

Every error raised out of a repository or service derives from
:class:`PersistenceError`, so callers never see a raw driver exception
without context. The wrapped low-level exception, if any, is kept on
``cause`` for diagnostics.
"""
from typing import Optional

from sqlalchemy.exc import IntegrityError


class PersistenceError(Exception):
    code = "persistence_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationError(PersistenceError):
    """Input is missing a required field or carries an invalid value."""

    code = "validation_error"


class InvalidBloodGroupError(ValidationError):
    code = "invalid_blood_group"


class ConflictError(PersistenceError):
    """A uniqueness rule was violated (document, record number, owner)."""

    code = "conflict"


class NotFoundError(PersistenceError):
    code = "not_found"


class StateError(PersistenceError):
    """A transaction scope was used out of order."""

    code = "invalid_state"


class StorageError(PersistenceError):
    """The store rejected or failed a statement."""

    code = "storage_error"


class TransactionError(StorageError):
    """A multi-statement operation failed and was rolled back."""

    code = "transaction_error"


class DatabaseConnectionError(PersistenceError):
    """No usable connection could be obtained from the pool."""

    code = "connection_error"


class PoolExhaustedError(DatabaseConnectionError):
    code = "pool_exhausted"


def conflict_from_integrity_error(exc: IntegrityError) -> Optional[ConflictError]:
    """Translate a unique-constraint violation into a :class:`ConflictError`.

    Returns ``None`` for integrity failures that are not uniqueness
    violations (foreign key, check, not-null), which callers treat as
    storage errors.
    """
    detail = str(exc.orig).lower()
    if any(marker in detail for marker in ("foreign key", "check constraint", "not null", "not-null")):
        return None
    if "record_number" in detail:
        return ConflictError("A clinical record with that record number already exists", cause=exc)
    if "patient_id" in detail:
        return ConflictError("The patient already has a clinical record", cause=exc)
    if "document" in detail:
        return ConflictError("An active patient with that document already exists", cause=exc)
    return None
