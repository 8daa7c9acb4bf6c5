"""
FastAPI Application Entry Point.

This is the main application file for the EGZIT move backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from egzit.app.core.config import settings
from egzit.app.core.logging import setup_logging
from egzit.app.core.observability import ObservabilityMiddleware
from egzit.app.core.redis_client import ping_redis
from egzit.app.api.v1.router import router as api_v1_router
from egzit.app.db.session import engine, Base
from egzit.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from egzit.app.models.user import User  # noqa: F401
from egzit.app.models.audit_log import AuditLog  # noqa: F401
from egzit.app.models.mover import Mover  # noqa: F401
from egzit.app.models.move import Move  # noqa: F401
from egzit.app.models.quote import Quote  # noqa: F401
from egzit.app.models.tracking_event import MoveTrackingEvent  # noqa: F401
from egzit.app.models.booking import Booking  # noqa: F401
from egzit.app.models.move_performance import MovePerformance  # noqa: F401
from egzit.app.models.notification import Notification  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging.
    2. Creates database tables on startup.
    """
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Move lifecycle backend: requests, quotes, scheduling, payment and live tracking",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus Redis reachability. Redis being down does not fail the check."""
    return {
        "status": "healthy",
        "redis": "ok" if await ping_redis() else "unavailable",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to the EGZIT Move Backend API",
        "docs": "/docs",
        "health": "/health",
    }
