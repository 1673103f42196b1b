"""Liveness and readiness endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from apartment_api.db.engine import check_engine_health
from apartment_api.dependencies import get_db_engine

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness probe: 200 as long as the process serves requests.

    Example:
        >>> GET /api/health
        {"status": "ok"}
    """
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check(engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    """
    Readiness probe: 200 when the database answers, 503 otherwise.

    Example:
        >>> GET /api/ready
        {"status": "ready", "checks": {"database": "ok"}}
    """
    if check_engine_health(engine):
        return JSONResponse(content={"status": "ready", "checks": {"database": "ok"}})

    logger.error("readiness_check_failed", reason="database_not_accessible")
    return JSONResponse(
        status_code=503,
        content={"status": "not ready", "checks": {"database": "failed"}},
    )
