"""
Redis client initialization and connection management.

Redis backs the per-vehicle locks taken by the consistency engine.
"""

import redis.asyncio as redis
from fleetinspect.app.core.config import settings


# Create async Redis client
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.
    
    Used as a FastAPI dependency so tests can override it.
    """
    return redis_client

