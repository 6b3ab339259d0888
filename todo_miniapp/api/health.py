"""
Health Check Endpoints.

Endpoints:
- /health, /api/health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from todo_miniapp.core.config import get_app_config
from todo_miniapp.core.database import Database, get_database
from todo_miniapp.core.logging import get_logger
from todo_miniapp.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(database: Database) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    start = utc_now()
    try:
        await database.ping()
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": type(e).__name__}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {"status": "healthy", "latency_ms": latency_ms}


@router.get("/health")
@router.get("/api/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {
        "status": "healthy",
        "environment": get_app_config().application.environment,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(database: Database = Depends(get_database)) -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the database is unreachable.
    """
    checks = {"database": await check_database(database)}

    if checks["database"]["status"] != "healthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
