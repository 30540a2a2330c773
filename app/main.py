"""
Application entry point: lifespan, middleware, routers and error handlers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.db.helpers import DatabaseError
from app.db.pool import DatabasePoolManager
from app.db.schema import apply_schema
from app.infrastructure.observability.logging import get_logger, setup_logging
from app.middleware import CORSMiddleware, RateLimitHeadersMiddleware, RequestContextMiddleware
from app.routes import (
    admin,
    auth,
    biodatas,
    contact_requests,
    favorites,
    health,
    payments,
    premium,
    success_stories,
    users,
)
from app.services.errors import InternalError, WorkflowError
from app.services.redis_client import redis_client

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown with proper resource management."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    db = DatabasePoolManager()
    try:
        logger.info("Initializing database pool")
        await db.initialize()
        if settings.DB_APPLY_SCHEMA_ON_STARTUP:
            await apply_schema(db)
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        await db.close()
        raise
    app.state.db = db

    # The rate limiter fails open, so a missing Redis degrades instead of blocking startup
    try:
        logger.info("Initializing Redis connection")
        await redis_client.initialize()
    except RuntimeError as e:
        logger.warning("Redis unavailable, rate limiting degraded", error=str(e))

    logger.info("All services initialized", redis=redis_client.initialized)

    yield

    logger.info("Application shutting down")
    shutdown_errors = []

    try:
        await redis_client.close()
    except Exception as e:
        logger.error("Error closing Redis", error=str(e))
        shutdown_errors.append(f"Redis: {e}")

    try:
        await db.close()
    except Exception as e:
        logger.error("Error closing database pool", error=str(e))
        shutdown_errors.append(f"Database: {e}")

    if shutdown_errors:
        logger.warning("Some services had shutdown errors", errors=shutdown_errors)
    else:
        logger.info("All services closed successfully")


async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Workflow error",
        code=exc.code,
        status_code=exc.status_code,
        message=exc.message,
        path=request.url.path,
        **{f"ctx_{key}": value for key, value in exc.context.items()},
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error(
        "Unhandled database error",
        operation=exc.operation,
        error=str(exc),
        path=request.url.path,
    )
    error = InternalError("Internal server error")
    return JSONResponse(error.to_dict(), status_code=error.status_code)


def create_app() -> FastAPI:
    app = FastAPI(
        title="True Companions API",
        description="Matrimonial biodata service with premium and contact-unlock workflows",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(WorkflowError, workflow_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)

    # Added last runs first: request context must exist before the others read it
    app.add_middleware(RateLimitHeadersMiddleware)
    app.add_middleware(CORSMiddleware, allowed_origins=settings.CORS_ALLOWED_ORIGINS)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(premium.router)
    app.include_router(biodatas.router)
    app.include_router(contact_requests.router)
    app.include_router(favorites.router)
    app.include_router(payments.router)
    app.include_router(admin.router)
    app.include_router(success_stories.router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log HTTP requests with timing."""
        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        logger.info(
            "HTTP request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(process_time, 2),
        )
        return response

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
