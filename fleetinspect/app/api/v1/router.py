"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from fleetinspect.app.api.v1.endpoints import auth, vehicles, reports, alerts, admin

router = APIRouter()

# Authentication endpoints
router.include_router(auth.router)

# Fleet state
router.include_router(vehicles.router)
router.include_router(reports.router)
router.include_router(alerts.router)

# Admin endpoints
router.include_router(admin.router)
