"""
Report Store.

Persists inspection reports together with their evidence attachments.
Never touches vehicle or alert state; that belongs to the consistency engine.
"""

import uuid
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from fleetinspect.app.models.enums import InspectionStatus
from fleetinspect.app.models.inspection_report import InspectionReport, InspectionFile
from fleetinspect.app.schemas.inspection_report import InspectionReportCreate


class ReportStore:
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def create(self, report: InspectionReportCreate) -> str:
        """
        Persist a report and its attachments under a fresh id.
        
        Args:
            report: Validated submission payload
        
        Returns:
            The new report id
        """
        report_id = str(uuid.uuid4())
        attachments = [*report.photos, *report.videos]
        
        row = InspectionReport(
            id=report_id,
            vehicle_id=report.vehicle_id,
            inspector_name=report.inspector_name,
            date=report.date,
            odometer_reading=report.odometer_reading,
            check_tires=report.checks.tires,
            check_brakes=report.checks.brakes,
            check_lights=report.checks.lights,
            check_fluids=report.checks.fluids,
            defect_description=report.defect_description,
            status=report.status,
            files=[
                InspectionFile(
                    position=position,
                    file_name=item.name,
                    file_type=item.type,
                    file_size=item.size,
                    file_data=item.data_url,
                )
                for position, item in enumerate(attachments)
            ],
        )
        self.db.add(row)
        await self.db.flush()  # Caller commits
        return report_id
    
    async def list(self) -> List[InspectionReport]:
        """All reports, newest inspection date first."""
        result = await self.db.execute(
            select(InspectionReport).order_by(
                InspectionReport.date.desc(),
                InspectionReport.created_at.desc(),
            )
        )
        return list(result.scalars().all())
    
    async def get(self, report_id: str) -> Optional[InspectionReport]:
        result = await self.db.execute(
            select(InspectionReport).where(InspectionReport.id == report_id)
        )
        return result.scalar_one_or_none()
    
    async def set_status(self, report_id: str, status: InspectionStatus) -> bool:
        """Set a report's status. Returns False when the report does not exist."""
        stmt = update(InspectionReport).where(
            InspectionReport.id == report_id
        ).values(status=status)
        result = await self.db.execute(stmt)
        return result.rowcount > 0
