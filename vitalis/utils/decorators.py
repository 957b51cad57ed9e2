"""Decorators for service-layer storage calls."""
import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from vitalis.utils.errors import StorageError, conflict_from_integrity_error

logger = logging.getLogger(__name__)


def storage_operation(description: str):
    """Translate store exceptions raised by a single-statement operation.

    Unique violations become :class:`ConflictError`; any other SQLAlchemy
    error becomes :class:`StorageError` with the original as its cause.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except IntegrityError as exc:
                conflict = conflict_from_integrity_error(exc)
                if conflict is not None:
                    raise conflict from exc
                logger.error(f"Integrity error while trying to {description}: {exc}")
                raise StorageError(f"Failed to {description}", cause=exc) from exc
            except SQLAlchemyError as exc:
                logger.error(f"Storage error while trying to {description}: {exc}")
                raise StorageError(f"Failed to {description}", cause=exc) from exc

        return wrapper

    return decorator
