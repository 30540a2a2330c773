# app/routes/health.py
"""
Liveness and readiness endpoints.
"""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.services.redis_client import redis_client

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "true-companions-api"}


@router.get("/readyz")
async def readyz(request: Request):
    """
    Readiness: the database must answer. Redis is reported but only degrades
    readiness when rate limiting is configured to fail closed.
    """
    checks = {}

    db = getattr(request.app.state, "db", None)
    if db is None:
        checks["database"] = {"ok": False, "error": "Database pool not initialized"}
    else:
        db_health = await db.health_check()
        checks["database"] = {
            "ok": db_health.get("healthy", False),
            "connection_time_ms": db_health.get("connection_time_ms"),
            "pool_stats": db_health.get("pool_stats"),
        }
        if not checks["database"]["ok"]:
            checks["database"]["error"] = db_health.get("error", "Database unhealthy")

    t0 = time.time()
    redis_ok = await redis_client.ping()
    checks["redis"] = {"ok": redis_ok, "latency_ms": round((time.time() - t0) * 1000, 1)}

    overall_ok = checks["database"]["ok"] and (redis_ok or settings.RATE_LIMIT_FAIL_OPEN)
    body = {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
    return JSONResponse(body, status_code=200 if overall_ok else 503)
