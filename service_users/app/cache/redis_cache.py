"""
Redis client wrapper for the Users service.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from shared.errors import CacheUnavailableError, CacheReadError, CacheWriteError


class RedisCache:
    """Thin async Redis client holding raw string values."""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.logger = get_logger("users.cache.redis")
        self.redis: Optional[redis.Redis] = client

    async def start(self):
        """Start the Redis cache."""
        try:
            if self.redis is None:
                self.redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )

            # Test connection
            await self.redis.ping()

            self.logger.info("Redis cache started", redis_url=self.redis_url)

        except RedisError as e:
            self.logger.error("Redis Error", error=str(e))
            raise CacheUnavailableError(str(e))

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.logger.info("Redis cache stopped")

    async def get(self, key: str) -> Optional[str]:
        """Get a raw value, None when absent."""
        try:
            return await self.redis.get(key)
        except RedisError as e:
            raise CacheReadError(str(e)) from e

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Set a value that expires after ttl_seconds, replacing any existing one."""
        try:
            await self.redis.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheWriteError(str(e)) from e

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self.redis.ping()
            return True
        except RedisError:
            return False
