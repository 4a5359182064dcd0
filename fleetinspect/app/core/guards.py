"""
Security guards for role-based access control.

Provides dependencies for protecting endpoints and the report visibility
check applied at the query boundary.
"""

from typing import List
from fastapi import Depends, HTTPException, status
from fleetinspect.app.models.enums import UserRole
from fleetinspect.app.core.dependencies import get_current_user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.
    
    Usage:
        @router.put("/reports/{report_id}/status")
        async def update_status(current_user: dict = Depends(require_role([UserRole.ADMIN]))):
            ...
    
    Raises:
        HTTPException 403 if user role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        try:
            user_role = UserRole(current_user.get("role"))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid role in token"
            )
        
        if user_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )
        
        return current_user
    
    return role_checker


def can_view_report(current_user: dict, inspector_name: str) -> bool:
    """
    Report visibility check.
    
    Admins see every report. Drivers see reports whose inspector name
    contains their display name (case-insensitive).
    """
    if current_user.get("role") == UserRole.ADMIN.value:
        return True
    
    name = (current_user.get("name") or "").strip().lower()
    if not name:
        return False
    return name in inspector_name.lower()
