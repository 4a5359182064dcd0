"""
Enumerations shared by the fleet inspection models.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.
    
    Roles:
        ADMIN: Reviews reports and flips pass/fail status
        DRIVER: Submits inspection checklists (default role)
    """
    ADMIN = "ADMIN"
    DRIVER = "DRIVER"


class InspectionStatus(str, enum.Enum):
    """Outcome of an inspection, mirrored onto the vehicle."""
    PASS = "pass"
    FAIL = "fail"
    PENDING = "pending"  # Reachable only through a status edit


class AlertType(str, enum.Enum):
    """Maintenance alert types."""
    FAILED_INSPECTION = "failed_inspection"
    PENDING_MAINTENANCE = "pending_maintenance"
    OVERDUE_INSPECTION = "overdue_inspection"


class AlertSeverity(str, enum.Enum):
    """Maintenance alert severity."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
