"""
FastAPI Application Entry Point.

This is the main application file for the Fleet Inspect Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from redis.exceptions import RedisError
from fleetinspect.app.core.config import settings
from fleetinspect.app.api.v1.router import router as api_v1_router
from fleetinspect.app.core.observability import ObservabilityMiddleware
from fleetinspect.app.core.redis_client import redis_client, get_redis
from fleetinspect.app.db.session import engine, Base, AsyncSessionLocal
from fleetinspect.app.services.seed import seed_vehicles
from fleetinspect.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from fleetinspect.app.models.vehicle import Vehicle
from fleetinspect.app.models.inspection_report import InspectionReport, InspectionFile
from fleetinspect.app.models.maintenance_alert import MaintenanceAlert
from fleetinspect.app.models.audit_log import AuditLog

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.
    
    1. Creates database tables on startup.
    2. Seeds the demo fleet when enabled.
    3. Closes the Redis connection pool on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    if settings.seed_demo_data:
        async with AsyncSessionLocal() as session:
            await seed_vehicles(session)
    
    logger.info("%s ready (database: %s)", settings.app_name, engine.url.render_as_string(hide_password=True))
    yield
    await redis_client.aclose()
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Fleet vehicle inspection tracker: reports, vehicle status and maintenance alerts",
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
    
    Reports whether the lock store (Redis) is reachable. The API stays up
    without it, but report writes fail until it returns.
    
    Returns:
        dict: Status and application information
    """
    try:
        redis_ok = bool(await redis.ping())
    except RedisError:
        redis_ok = False
    
    return {
        "status": "healthy" if redis_ok else "degraded",
        "redis": "connected" if redis_ok else "unavailable",
        "app_name": settings.app_name,
        "version": settings.api_version,
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
        "message": "Welcome to Fleet Inspect Backend API",
        "docs": "/docs",
        "health": "/health",
    }
