"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vitalis.core.connection import ConnectionSource
from vitalis.dependencies.services import get_connection_source
from vitalis.schemas.common import HealthResponse
from vitalis.utils.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(source: ConnectionSource = Depends(get_connection_source)):
    try:
        source.ping()
    except DatabaseConnectionError as exc:
        logger.warning(f"Health check failed: {exc.message}")
        body = HealthResponse(status="degraded", database="unavailable", detail=exc.message)
        return JSONResponse(status_code=503, content=body.model_dump())
    return HealthResponse(status="ok", database="ok")
