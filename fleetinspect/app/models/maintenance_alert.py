"""
Maintenance Alert database model.
"""

from sqlalchemy import Column, String, Text, Boolean, Date, DateTime, Enum
from sqlalchemy.sql import func
from fleetinspect.app.db.session import Base
from fleetinspect.app.models.enums import AlertType, AlertSeverity


class MaintenanceAlert(Base):
    """
    Open notification tied to a vehicle.
    
    Alerts are resolved, never deleted. Only unresolved alerts are surfaced.
    """
    __tablename__ = "maintenance_alerts"
    
    id = Column(String(36), primary_key=True, index=True)
    
    # Vehicle reference plus denormalized display number
    vehicle_id = Column(String(50), nullable=False, index=True)
    bus_number = Column(String(50), nullable=False)
    
    alert_type = Column(Enum(AlertType), nullable=False, index=True)
    severity = Column(Enum(AlertSeverity), nullable=False)
    message = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    
    # State
    resolved = Column(Boolean, default=False, nullable=False, index=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<MaintenanceAlert(vehicle='{self.vehicle_id}', type='{self.alert_type.value}', resolved={self.resolved})>"
