"""
Inspection report and evidence attachment models.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleetinspect.app.db.session import Base
from fleetinspect.app.models.enums import InspectionStatus


class InspectionReport(Base):
    """
    One driver's checklist submission for a vehicle on a given date.
    
    Created once, status editable afterwards by an admin, never deleted.
    Correlated with vehicles and alerts by ``vehicle_id`` only.
    """
    __tablename__ = "inspection_reports"
    
    id = Column(String(36), primary_key=True, index=True)
    vehicle_id = Column(String(50), nullable=False, index=True)
    
    inspector_name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    odometer_reading = Column(Integer, nullable=False)
    
    # Four-item checklist
    check_tires = Column(Boolean, default=False, nullable=False)
    check_brakes = Column(Boolean, default=False, nullable=False)
    check_lights = Column(Boolean, default=False, nullable=False)
    check_fluids = Column(Boolean, default=False, nullable=False)
    
    defect_description = Column(Text, nullable=True)
    status = Column(Enum(InspectionStatus), nullable=False, index=True)
    
    files = relationship(
        "InspectionFile",
        back_populates="report",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="InspectionFile.position",
    )
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<InspectionReport(id='{self.id}', vehicle='{self.vehicle_id}', status='{self.status.value}')>"


class InspectionFile(Base):
    """Photo or video evidence, stored as a base64 data URL."""
    __tablename__ = "inspection_files"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    report_id = Column(String(36), ForeignKey("inspection_reports.id"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_data = Column(Text, nullable=False)
    
    report = relationship("InspectionReport", back_populates="files")
    
    @property
    def is_photo(self) -> bool:
        return self.file_type.startswith("image/")
    
    @property
    def is_video(self) -> bool:
        return self.file_type.startswith("video/")
    
    def __repr__(self):
        return f"<InspectionFile(report='{self.report_id}', name='{self.file_name}', type='{self.file_type}')>"
