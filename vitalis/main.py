from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from vitalis.core.config import settings
from vitalis.core.connection import ConnectionSource
from vitalis.core.logger import setup_logging
from vitalis.middleware import error_handler
from vitalis.middleware.logging import RequestLoggerMiddleware
from vitalis.utils.errors import PersistenceError

# Routers
from vitalis.routers import clinical_records as clinical_records_router
from vitalis.routers import health as health_router
from vitalis.routers import patients as patients_router


def create_app(source: Optional[ConnectionSource] = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    When no connection source is given, one is built from settings at
    startup and disposed at shutdown.
    """
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "connection_source", None) is None
        if owned:
            app.state.connection_source = ConnectionSource.from_settings(settings)
        try:
            yield
        finally:
            if owned:
                app.state.connection_source.dispose()

    openapi_tags = [
        {"name": "patients", "description": "Patients and their clinical record, managed as one aggregate."},
        {"name": "clinical records", "description": "Clinical record reads and updates."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title=f"{settings.APP_NAME} Records API",
        version="0.1.0",
        description="Patient and clinical record persistence service.",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    if source is not None:
        app.state.connection_source = source

    # Middleware
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(PersistenceError, error_handler.persistence_exception_handler)

    # Include routers
    app.include_router(health_router.router)
    app.include_router(patients_router.router)
    app.include_router(clinical_records_router.router)

    return app


app = create_app()
