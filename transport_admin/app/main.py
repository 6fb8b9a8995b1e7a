"""
FastAPI Application Entry Point.

This is the main application file for the Transport Admin Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from transport_admin.app.core.config import settings
from transport_admin.app.api.v1.router import router as api_v1_router
from transport_admin.app.db.session import Database
from transport_admin.app.core.redis_client import create_redis_client, ping_redis
from transport_admin.app.core.observability import ObservabilityMiddleware, configure_logging
from transport_admin.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from transport_admin.app.models.company import Company
from transport_admin.app.models.vehicle_owner import VehicleOwner
from transport_admin.app.models.driver import Driver  # after vehicle owner for FK
from transport_admin.app.models.manager import Manager
from transport_admin.app.models.trip import Trip
from transport_admin.app.models.transport_request import TransportRequest
from transport_admin.app.models.payment import Payment
from transport_admin.app.models.audit_log import AuditLog
from transport_admin.app.models.notification import Notification

logger = logging.getLogger("transport_admin")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Builds the database handle and redis client (unless already provided).
    2. Creates database tables on startup.
    3. Disposes both on shutdown.
    """
    configure_logging(settings.log_level)

    if getattr(app.state, "database", None) is None:
        app.state.database = Database.from_settings(settings)
    if getattr(app.state, "redis", None) is None:
        app.state.redis = create_redis_client(settings)

    await app.state.database.create_all()
    logger.info("%s started (api %s)", settings.app_name, settings.api_version)
    yield

    await app.state.database.dispose()
    await app.state.redis.aclose()
    logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        description="Admin backend for transport requests, trips and payments",
        lifespan=lifespan,
    )

    app.add_middleware(ObservabilityMiddleware)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            dict: Status and application information
        """
        redis_client = getattr(request.app.state, "redis", None)
        redis_ok = await ping_redis(redis_client) if redis_client is not None else False
        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.api_version,
            "redis": "up" if redis_ok else "down",
        }

    # Include API v1 router
    app.include_router(api_v1_router, prefix=f"/{settings.api_version}")

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint.

        Returns:
            dict: Welcome message and API documentation links
        """
        return {
            "message": "Welcome to Transport Admin Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
