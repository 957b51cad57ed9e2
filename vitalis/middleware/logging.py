"""Request/response logging middleware."""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("vitalis.middleware.logging")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and elapsed time.

    Client errors (4xx, such as a duplicate document or a missing patient)
    are logged at WARNING, storage failures (5xx) at ERROR.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)",
        )
        return response
