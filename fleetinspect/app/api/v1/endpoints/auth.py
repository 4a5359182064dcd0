"""
Authentication API endpoints.

Login against the fixed account table and token introspection.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fleetinspect.app.schemas.auth import UserLogin, TokenResponse, UserResponse
from fleetinspect.app.core.credentials import authenticate
from fleetinspect.app.core.jwt import create_access_token
from fleetinspect.app.core.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin):
    """
    Log in with username and password.
    
    Returns a bearer token carrying the user's id, display name and role.
    """
    account = authenticate(credentials.username, credentials.password)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    return TokenResponse(
        access_token=create_access_token(account.token_claims()),
        user_id=account.user_id,
        username=account.username,
        name=account.name,
        role=account.role,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: dict = Depends(get_current_user)):
    """Return the authenticated user's identity."""
    return UserResponse(
        user_id=current_user["user_id"],
        username=current_user["sub"],
        name=current_user.get("name", ""),
        role=current_user["role"],
    )
