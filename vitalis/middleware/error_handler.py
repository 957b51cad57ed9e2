"""Global error handlers for the application."""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from vitalis.schemas.common import ErrorResponse
from vitalis.utils.errors import (
    ConflictError,
    DatabaseConnectionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DatabaseConnectionError, 503),
)


def status_for(exc: PersistenceError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def persistence_exception_handler(request: Request, exc: PersistenceError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} (cause: {exc.cause!r})")
        # Storage internals stay in the log
        message = "An internal storage error occurred" if status_code == 500 else exc.message
    else:
        message = exc.message
    body = ErrorResponse(error=message, code=exc.code)
    return JSONResponse(status_code=status_code, content=body.model_dump())
