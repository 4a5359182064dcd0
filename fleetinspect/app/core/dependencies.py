"""
Request dependencies for FastAPI.

Authentication from the bearer token and construction of the
consistency engine for the request's database session.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from fleetinspect.app.core.jwt import decode_access_token
from fleetinspect.app.core.redis_client import get_redis
from fleetinspect.app.db.session import get_db
from fleetinspect.app.services.consistency import ConsistencyEngine

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    FastAPI dependency for JWT authentication.
    
    Returns:
        Decoded token payload (sub, user_id, name, role)
        
    Raises:
        HTTPException: 401 if the token is invalid or incomplete
    """
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    if not payload.get("user_id") or not payload.get("role"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    return payload


async def get_consistency_engine(
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
) -> ConsistencyEngine:
    return ConsistencyEngine.for_session(db, redis)
