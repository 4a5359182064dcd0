"""
Authentication schemas.
"""

from pydantic import BaseModel, Field
from fleetinspect.app.models.enums import UserRole


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    username: str
    name: str
    role: UserRole


class UserResponse(BaseModel):
    user_id: str
    username: str
    name: str
    role: UserRole
