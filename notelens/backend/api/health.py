"""
Health Check Endpoints.

Provides liveness and readiness checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (store reachable, analysis mode, pool status)
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from notelens.backend.ai.service import AIAnalysisService, get_analysis_service
from notelens.backend.core.concurrency import pool_status
from notelens.backend.core.dependencies import Config, Store
from notelens.backend.core.logging import get_logger
from notelens.backend.core.utils import utc_now
from notelens.backend.repositories.store import EntityStore

router = APIRouter()
logger = get_logger(__name__)


async def check_store(store: EntityStore) -> dict[str, Any]:
    """
    Check the entity store answers queries.

    Returns:
        Dict with status, backend name, and record counts when available
    """
    try:
        start = utc_now()
        await store.get_user("health-check")
        latency_ms = int((utc_now() - start).total_seconds() * 1000)

        result: dict[str, Any] = {
            "status": "healthy",
            "backend": getattr(store, "backend_name", type(store).__name__),
            "latency_ms": latency_ms,
        }
        counts = getattr(store, "counts", None)
        if callable(counts):
            result["records"] = counts()
        return result

    except Exception as e:
        logger.warning("Store health check failed", extra={"error": str(e)})
        return {
            "status": "unhealthy",
            "error": str(e),
        }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(
    store: Store,
    config: Config,
    analysis: Annotated[AIAnalysisService, Depends(get_analysis_service)],
) -> dict[str, Any]:
    """
    Readiness check.

    Returns 200 if ready to serve traffic, 503 if the store is unhealthy.
    Guest analysis mode is reported but does not make the service unready.
    """
    checks = {
        "store": await check_store(store),
        "analysis": {
            "status": "healthy" if config.features.ai_analysis_enabled else "disabled",
            "mode": analysis.mode,
        },
    }

    if checks["store"]["status"] == "unhealthy":
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
        "pools": pool_status(),
        "timestamp": utc_now().isoformat(),
    }
