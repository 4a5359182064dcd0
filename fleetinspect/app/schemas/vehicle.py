"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle management.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List
from fleetinspect.app.models.enums import InspectionStatus


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    id: str = Field(..., min_length=1, max_length=50, description="Vehicle identifier")
    bus_number: str = Field(..., min_length=1, max_length=50, description="Display number")
    model: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    odometer_reading: int = Field(0, ge=0)


class VehicleUpdate(BaseModel):
    """
    Schema for admin edits to a vehicle.
    
    Status and defect flag are derived from inspections and cannot be set here.
    """
    odometer_reading: Optional[int] = Field(None, ge=0)
    last_inspection_date: Optional[date] = None


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: str
    bus_number: str
    model: Optional[str]
    year: Optional[int]
    status: InspectionStatus
    last_inspection_date: Optional[date]
    odometer_reading: int
    has_defects: bool
    updated_at: datetime
    
    class Config:
        from_attributes = True


class VehicleListResponse(BaseModel):
    """Schema for vehicle list."""
    vehicles: List[VehicleResponse]
    total: int
