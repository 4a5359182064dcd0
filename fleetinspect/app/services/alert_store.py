"""
Alert Store.

Open maintenance alerts keyed by (vehicle, alert type).
"""

import uuid
from datetime import date, datetime, timezone
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from fleetinspect.app.models.enums import AlertType, AlertSeverity
from fleetinspect.app.models.maintenance_alert import MaintenanceAlert


class AlertStore:
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list_unresolved(self) -> List[MaintenanceAlert]:
        """Unresolved alerts, newest date first."""
        result = await self.db.execute(
            select(MaintenanceAlert)
            .where(MaintenanceAlert.resolved == False)
            .order_by(MaintenanceAlert.date.desc(), MaintenanceAlert.created_at.desc())
        )
        return list(result.scalars().all())
    
    async def create(
        self,
        *,
        vehicle_id: str,
        bus_number: str,
        alert_type: AlertType,
        severity: AlertSeverity,
        message: str,
        alert_date: date,
    ) -> str:
        alert_id = str(uuid.uuid4())
        self.db.add(
            MaintenanceAlert(
                id=alert_id,
                vehicle_id=vehicle_id,
                bus_number=bus_number,
                alert_type=alert_type,
                severity=severity,
                message=message,
                date=alert_date,
                resolved=False,
            )
        )
        await self.db.flush()
        return alert_id
    
    async def resolve(self, vehicle_id: str, alert_type: AlertType) -> int:
        """
        Mark every unresolved (vehicle, type) alert as resolved.
        
        Idempotent: a no-op when nothing matches.
        
        Returns:
            Number of alerts resolved
        """
        stmt = update(MaintenanceAlert).where(
            MaintenanceAlert.vehicle_id == vehicle_id,
            MaintenanceAlert.alert_type == alert_type,
            MaintenanceAlert.resolved == False
        ).values(
            resolved=True,
            resolved_at=datetime.now(timezone.utc)
        )
        result = await self.db.execute(stmt)
        return result.rowcount
