"""
Vehicle database model.

One row per tracked fleet unit (bus) with its current inspection status.
"""

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Enum
from sqlalchemy.sql import func
from fleetinspect.app.db.session import Base
from fleetinspect.app.models.enums import InspectionStatus


class Vehicle(Base):
    """
    Vehicle model.
    
    ``has_defects`` always equals ``status == FAIL``. Both columns are
    written only by the consistency engine.
    """
    __tablename__ = "vehicles"
    
    id = Column(String(50), primary_key=True, index=True)
    
    # Vehicle identification
    bus_number = Column(String(50), unique=True, nullable=False, index=True)
    model = Column(String(100), nullable=True)
    year = Column(Integer, nullable=True)
    
    # Inspection state
    status = Column(Enum(InspectionStatus), default=InspectionStatus.PENDING, nullable=False, index=True)
    last_inspection_date = Column(Date, nullable=True)
    odometer_reading = Column(Integer, default=0, nullable=False)
    has_defects = Column(Boolean, default=False, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Vehicle(id='{self.id}', bus='{self.bus_number}', status='{self.status.value}')>"
