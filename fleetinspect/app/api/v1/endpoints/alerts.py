"""
Maintenance Alert API Endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleetinspect.app.db.session import get_db
from fleetinspect.app.models.enums import UserRole
from fleetinspect.app.schemas.maintenance_alert import (
    MaintenanceAlertCreate, MaintenanceAlertResponse, MaintenanceAlertListResponse
)
from fleetinspect.app.schemas.inspection_report import ReportActionResponse
from fleetinspect.app.core.guards import require_role
from fleetinspect.app.core.dependencies import get_current_user, get_consistency_engine
from fleetinspect.app.services.alert_store import AlertStore
from fleetinspect.app.services.consistency import ConsistencyEngine

router = APIRouter(prefix="/alerts", tags=["Maintenance Alerts"])


@router.get("", response_model=MaintenanceAlertListResponse)
async def list_alerts(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List unresolved maintenance alerts, newest first."""
    alerts = await AlertStore(db).list_unresolved()
    return MaintenanceAlertListResponse(
        alerts=[MaintenanceAlertResponse.model_validate(a) for a in alerts],
        total=len(alerts)
    )


@router.post("", response_model=ReportActionResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    alert_data: MaintenanceAlertCreate,
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    engine: ConsistencyEngine = Depends(get_consistency_engine)
):
    """Raise a maintenance alert by hand (Admin only)."""
    alert_id = await engine.create_manual_alert(alert_data, actor_username=current_user["sub"])
    return ReportActionResponse(id=alert_id, message="Maintenance alert created successfully")
