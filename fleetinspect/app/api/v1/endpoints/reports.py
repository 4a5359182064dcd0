"""
Inspection Report API Endpoints.

Drivers submit reports; admins change their status. Both writes go through
the consistency engine so vehicles and alerts follow along.
"""

from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleetinspect.app.db.session import get_db
from fleetinspect.app.models.enums import UserRole
from fleetinspect.app.schemas.inspection_report import (
    InspectionReportCreate, InspectionReportResponse, InspectionReportListResponse,
    ReportStatusUpdate, ReportActionResponse
)
from fleetinspect.app.core.guards import require_role, can_view_report
from fleetinspect.app.core.dependencies import get_current_user, get_consistency_engine
from fleetinspect.app.core.exceptions import ResourceNotFoundError
from fleetinspect.app.services.consistency import ConsistencyEngine
from fleetinspect.app.services.report_store import ReportStore

router = APIRouter(prefix="/reports", tags=["Inspection Reports"])


@router.get("", response_model=InspectionReportListResponse)
async def list_reports(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List inspection reports, newest first.
    
    Admins see all reports; drivers see their own.
    """
    reports = [
        report for report in await ReportStore(db).list()
        if can_view_report(current_user, report.inspector_name)
    ]
    return InspectionReportListResponse(
        reports=[InspectionReportResponse.from_model(r) for r in reports],
        total=len(reports)
    )


@router.get("/{report_id}", response_model=InspectionReportResponse)
async def get_report(
    report_id: str = Path(..., description="Report ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await ReportStore(db).get(report_id)
    # Hidden reports look missing to drivers
    if not report or not can_view_report(current_user, report.inspector_name):
        raise ResourceNotFoundError("Inspection report", report_id)
    return InspectionReportResponse.from_model(report)


@router.post("", response_model=ReportActionResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: InspectionReportCreate,
    current_user: dict = Depends(require_role([UserRole.DRIVER, UserRole.ADMIN])),
    engine: ConsistencyEngine = Depends(get_consistency_engine)
):
    """
    Submit an inspection report.
    
    Updates the vehicle's status, inspection date and odometer, and opens or
    resolves failed-inspection alerts in the same transaction.
    """
    report_id = await engine.on_report_created(report_data, actor_username=current_user["sub"])
    return ReportActionResponse(id=report_id, message="Inspection report created successfully")


@router.put("/{report_id}/status", response_model=ReportActionResponse)
async def update_report_status(
    report_id: str = Path(..., description="Report ID"),
    status_data: ReportStatusUpdate = ...,
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    engine: ConsistencyEngine = Depends(get_consistency_engine)
):
    """Change a report's status (Admin only) and re-derive vehicle state and alerts."""
    await engine.on_report_status_changed(
        report_id, status_data.status, actor_username=current_user["sub"]
    )
    return ReportActionResponse(id=report_id, message="Report status updated successfully")
