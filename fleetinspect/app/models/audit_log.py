"""
Audit Log Database Model.

Tracks report submissions, status edits and manual alerts.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from fleetinspect.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.
    
    Events logged:
    - REPORT_SUBMITTED
    - REPORT_STATUS_CHANGED
    - ALERT_CREATED (manual alerts)
    - VEHICLE_CREATED / VEHICLE_UPDATED
    """
    __tablename__ = "audit_logs"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Who performed the action (None for system actions)
    actor_username = Column(String(100), nullable=True, index=True)
    
    # What action was performed
    action = Column(String(100), nullable=False, index=True)
    
    # Report, vehicle or alert id the action applied to
    target_id = Column(String(50), nullable=True, index=True)
    
    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)
    
    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    
    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_username}, target={self.target_id})>"
