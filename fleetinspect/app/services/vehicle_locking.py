"""
Per-vehicle mutual exclusion.

Every consistency transaction touching a vehicle runs while holding that
vehicle's lock, so two concurrent status changes cannot interleave their
writes. Locks live in Redis (``SET key token NX EX ttl``) and are shared by
every worker process.
"""

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.exceptions import RedisError

from fleetinspect.app.core.config import settings
from fleetinspect.app.core.exceptions import StorageFailureError, VehicleBusyError

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "lock:vehicle:"


class VehicleLockManager:
    
    def __init__(
        self,
        redis,
        ttl_seconds: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        poll_interval: float = 0.05,
    ):
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.vehicle_lock_ttl_seconds
        self.timeout_seconds = (
            settings.vehicle_lock_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self.poll_interval = poll_interval
    
    @staticmethod
    def key_for(vehicle_id: str) -> str:
        return f"{LOCK_KEY_PREFIX}{vehicle_id}"
    
    async def acquire(self, vehicle_id: str) -> str:
        """
        Acquire the lock for a vehicle.
        
        Polls until the lock is free or the timeout expires. The lock key
        expires after ``ttl_seconds`` so a crashed holder cannot block the
        vehicle forever.
        
        Returns:
            Token identifying this holder (needed for release)
        
        Raises:
            VehicleBusyError: If the lock could not be acquired in time
            StorageFailureError: If Redis is unreachable
        """
        token = uuid.uuid4().hex
        key = self.key_for(vehicle_id)
        deadline = time.monotonic() + self.timeout_seconds
        
        while True:
            try:
                acquired = await self.redis.set(key, token, ex=self.ttl_seconds, nx=True)
            except RedisError as exc:
                raise StorageFailureError("vehicle lock", str(exc)) from exc
            if acquired:
                return token
            if time.monotonic() >= deadline:
                logger.warning("Timed out waiting for lock on vehicle %s", vehicle_id)
                raise VehicleBusyError(vehicle_id)
            await asyncio.sleep(self.poll_interval)
    
    async def release(self, vehicle_id: str, token: str) -> bool:
        """
        Release the lock if it is still held by ``token``.
        
        Returns:
            True if the lock was released, False if it had expired or
            belongs to another holder
        """
        key = self.key_for(vehicle_id)
        try:
            current = await self.redis.get(key)
            if isinstance(current, bytes):
                # Client built with decode_responses=False
                current = current.decode("utf-8")
            if current != token:
                return False
            return await self.redis.delete(key) > 0
        except RedisError:
            # The TTL frees the key eventually
            logger.exception("Failed to release lock on vehicle %s", vehicle_id)
            return False
    
    @asynccontextmanager
    async def hold(self, vehicle_id: str) -> AsyncIterator[None]:
        token = await self.acquire(vehicle_id)
        try:
            yield
        finally:
            await self.release(vehicle_id, token)
