"""
Inspection Report Pydantic schemas.

Submission payloads are fully validated here, before the consistency
engine ever sees them: required fields, allowed status values and the
evidence size caps.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import date, datetime
from typing import Optional, List
from fleetinspect.app.core.config import settings
from fleetinspect.app.models.enums import InspectionStatus
from fleetinspect.app.models.inspection_report import InspectionReport


class SerializedFile(BaseModel):
    """Evidence attachment encoded as a data URL."""
    name: str = Field(..., min_length=1, max_length=255)
    size: int = Field(..., ge=0, description="File size in bytes")
    type: str = Field(..., min_length=1, max_length=100, description="MIME type")
    data_url: str = Field(..., min_length=1, description="Base64 encoded file data")
    
    @field_validator("size")
    @classmethod
    def check_file_size(cls, value: int) -> int:
        if value > settings.max_file_size_bytes:
            raise ValueError(f"File exceeds the {settings.max_file_size_bytes} byte limit")
        return value

    @field_validator("data_url")
    @classmethod
    def check_payload_size(cls, value: str) -> str:
        # The declared size is client-supplied; measure the base64 payload too
        payload = value.split(",", 1)[-1]
        decoded_size = len(payload) * 3 // 4 - payload[-2:].count("=")
        if decoded_size > settings.max_file_size_bytes:
            raise ValueError(f"File exceeds the {settings.max_file_size_bytes} byte limit")
        return value


class InspectionChecks(BaseModel):
    tires: bool
    brakes: bool
    lights: bool
    fluids: bool


class InspectionReportCreate(BaseModel):
    """Schema for a driver's inspection submission."""
    vehicle_id: str = Field(..., min_length=1, max_length=50)
    inspector_name: str = Field(..., min_length=1, max_length=255)
    date: date
    odometer_reading: int = Field(..., gt=0)
    checks: InspectionChecks
    defect_description: Optional[str] = None
    photos: List[SerializedFile] = Field(default_factory=list)
    videos: List[SerializedFile] = Field(default_factory=list)
    status: InspectionStatus
    
    @field_validator("status")
    @classmethod
    def check_submission_status(cls, value: InspectionStatus) -> InspectionStatus:
        if value == InspectionStatus.PENDING:
            raise ValueError("Invalid status. Must be pass or fail")
        return value
    
    @field_validator("inspector_name")
    @classmethod
    def check_inspector_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Inspector name is required")
        return value.strip()

    @field_validator("defect_description")
    @classmethod
    def strip_defect_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def check_evidence(self) -> "InspectionReportCreate":
        for photo in self.photos:
            if not photo.type.startswith("image/"):
                raise ValueError(f"Photo '{photo.name}' must have an image MIME type")
        for video in self.videos:
            if not video.type.startswith("video/"):
                raise ValueError(f"Video '{video.name}' must have a video MIME type")
        total = sum(len(item.data_url) for item in [*self.photos, *self.videos])
        if total > settings.max_evidence_bytes:
            raise ValueError(f"Evidence exceeds the {settings.max_evidence_bytes} byte limit per submission")
        return self


class ReportStatusUpdate(BaseModel):
    """Schema for an admin status edit."""
    status: InspectionStatus


class InspectionReportResponse(BaseModel):
    """Schema for inspection report response."""
    id: str
    vehicle_id: str
    inspector_name: str
    date: date
    odometer_reading: int
    checks: InspectionChecks
    defect_description: Optional[str]
    photos: List[SerializedFile]
    videos: List[SerializedFile]
    status: InspectionStatus
    created_at: Optional[datetime] = None
    
    @classmethod
    def from_model(cls, report: InspectionReport) -> "InspectionReportResponse":
        """Build the response, splitting attachments into photos and videos."""
        def serialize(item):
            return SerializedFile.model_construct(
                name=item.file_name,
                size=item.file_size,
                type=item.file_type,
                data_url=item.file_data,
            )
        
        return cls(
            id=report.id,
            vehicle_id=report.vehicle_id,
            inspector_name=report.inspector_name,
            date=report.date,
            odometer_reading=report.odometer_reading,
            checks=InspectionChecks(
                tires=report.check_tires,
                brakes=report.check_brakes,
                lights=report.check_lights,
                fluids=report.check_fluids,
            ),
            defect_description=report.defect_description,
            photos=[serialize(f) for f in report.files if f.is_photo],
            videos=[serialize(f) for f in report.files if f.is_video],
            status=report.status,
            created_at=report.created_at,
        )


class InspectionReportListResponse(BaseModel):
    reports: List[InspectionReportResponse]
    total: int


class ReportActionResponse(BaseModel):
    id: str
    message: str
