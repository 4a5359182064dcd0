"""
Audit logging service for tracking inspection events and admin actions.

Entries are added to the caller's session and committed together with the
change they describe.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from fleetinspect.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    REPORT_SUBMITTED = "REPORT_SUBMITTED"
    REPORT_STATUS_CHANGED = "REPORT_STATUS_CHANGED"
    ALERT_CREATED = "ALERT_CREATED"
    VEHICLE_CREATED = "VEHICLE_CREATED"
    VEHICLE_UPDATED = "VEHICLE_UPDATED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_username: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Add an event to the audit log.
    
    Args:
        db: Database session (caller commits)
        action: Action being performed (use AuditAction constants)
        actor_username: Username of the actor, None for system actions
        target_id: Report, vehicle or alert id the action applied to
        metadata: Additional context as JSON
        
    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_username=actor_username,
        action=action,
        target_id=target_id,
        meta_data=metadata
    )
    
    db.add(audit_log)
    await db.flush()
    
    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    target_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.
    
    Args:
        db: Database session
        target_id: Filter by target id
        action: Filter by action type
        limit: Maximum number of records to return
        
    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
    
    if target_id:
        query = query.where(AuditLog.target_id == target_id)
    
    if action:
        query = query.where(AuditLog.action == action)
    
    query = query.limit(limit)
    
    result = await db.execute(query)
    return list(result.scalars().all())
