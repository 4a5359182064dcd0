"""
Maintenance Alert schemas.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List
from fleetinspect.app.models.enums import AlertType, AlertSeverity


class MaintenanceAlertCreate(BaseModel):
    """Manual alert raised by an admin. The bus number is looked up."""
    vehicle_id: str = Field(..., min_length=1, max_length=50)
    alert_type: AlertType
    severity: AlertSeverity
    message: str = Field(..., min_length=1)
    date: date


class MaintenanceAlertResponse(BaseModel):
    id: str
    vehicle_id: str
    bus_number: str
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    date: date
    created_at: datetime
    
    class Config:
        from_attributes = True


class MaintenanceAlertListResponse(BaseModel):
    alerts: List[MaintenanceAlertResponse]
    total: int
