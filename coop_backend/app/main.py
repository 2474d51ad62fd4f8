"""
FastAPI Application Entry Point.

This is the main application file for the Transit Cooperative Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from coop_backend.app.core.config import settings
from coop_backend.app.api.v1.router import router as api_v1_router
from coop_backend.app.api.functions.router import router as functions_router
from coop_backend.app.db.session import engine, Base
from coop_backend.app.core.observability import ObservabilityMiddleware
from coop_backend.app.core.redis_client import get_redis, ping_redis
from coop_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from coop_backend.app.models.user import User, Profile, UserRoleAssignment  # noqa: F401
from coop_backend.app.models.bus import Bus  # noqa: F401
from coop_backend.app.models.role_request import RoleRequest  # noqa: F401
from coop_backend.app.models.notification import Notification  # noqa: F401
from coop_backend.app.models.audit_log import AuditLog  # noqa: F401

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.
    
    Creates database tables on startup and disposes the engine on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Backend for the transit cooperative dashboard: roles, fleet and account tooling",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check(redis=Depends(get_redis)):
    """
    Health check endpoint.
    
    Redis being down degrades role persistence only, so it is reported
    but does not fail the check.
    
    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "redis": "ok" if await ping_redis(redis) else "unavailable",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# REST API and function endpoints
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")
app.include_router(functions_router, prefix="/functions/v1")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.
    
    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to the Transit Cooperative Backend API",
        "docs": "/docs",
        "health": "/health",
    }
