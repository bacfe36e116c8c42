"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness check."""
    return HealthResponse(status="healthy", version="0.1.0")


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check: the database and the Redis broker must answer."""
    checks = {"database": "ok", "redis": "ok"}

    db_engine = getattr(request.app.state, "db_engine", None)
    if db_engine is None:
        checks["database"] = "not configured"
    else:
        try:
            async with db_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database readiness check failed: {type(e).__name__}")
            checks["database"] = "unavailable"

    redis_client = getattr(request.app.state, "redis", None)
    if redis_client is None:
        checks["redis"] = "not configured"
    else:
        try:
            await redis_client.ping()
        except (RedisError, OSError) as e:
            logger.warning(f"Redis readiness check failed: {type(e).__name__}")
            checks["redis"] = "unavailable"

    ready = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "not ready", "checks": checks},
    )
