"""
Redis Connection Module.

Manages the Redis connection used to cache pooled rental requests.
"""

import json
from typing import Optional

import redis.asyncio as redis
from loguru import logger

from config.settings import get_settings
from rentpool.modules.requests.models import RentalRequest

redis_log = logger.bind(module="Redis")


class RedisConnection:
    """Redis connection manager."""

    def __init__(self):
        """Initialize Redis connection."""
        self.settings = get_settings().redis
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        redis_log.info(f"Connecting to Redis at {self.settings.host}:{self.settings.port}")
        self._client = redis.Redis(
            host=self.settings.host,
            port=self.settings.port,
            db=self.settings.db,
            password=self.settings.password or None,
            decode_responses=True,
        )
        await self._client.ping()
        redis_log.info("Redis connected successfully")

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            redis_log.info("Redis connection closed")

    @property
    def client(self) -> redis.Redis:
        """Get Redis client."""
        if not self._client:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._client

    # ========== Key Generators ==========

    def _request_key(self, rental_request_id: int) -> str:
        """Generate key for cached rental request."""
        return f"request:{rental_request_id}"

    # ========== Request Cache Operations ==========

    async def cache_request(self, rental_request: RentalRequest) -> None:
        """
        Cache a pooled rental request with TTL.

        Args:
            rental_request: Request admitted to the pool
        """
        key = self._request_key(rental_request.id)
        data = rental_request.model_dump(mode="json")
        await self.client.set(
            key,
            json.dumps(data, ensure_ascii=False, default=str),
            ex=self.settings.request_ttl,
        )
        redis_log.debug(f"Cached {key}")

    async def get_cached_request(self, rental_request_id: int) -> Optional[RentalRequest]:
        """
        Get a cached rental request.

        Args:
            rental_request_id: Rental request ID

        Returns:
            Rental request or None if not cached
        """
        data = await self.client.get(self._request_key(rental_request_id))
        if data:
            return RentalRequest.model_validate(json.loads(data))
        return None

    async def clear_request(self, rental_request_id: int) -> None:
        """Remove a rental request from the cache."""
        await self.client.delete(self._request_key(rental_request_id))

    async def clear_requests(self, rental_request_ids: list[int]) -> None:
        """
        Remove several rental requests from the cache in one pipeline.

        Args:
            rental_request_ids: Rental request IDs
        """
        if not rental_request_ids:
            return
        async with self.client.pipeline() as pipe:
            for rental_request_id in rental_request_ids:
                pipe.delete(self._request_key(rental_request_id))
            await pipe.execute()
        redis_log.debug(f"Cleared {len(rental_request_ids)} cached requests")


# Singleton instance
_redis: Optional[RedisConnection] = None


async def get_redis() -> RedisConnection:
    """Get Redis connection singleton."""
    global _redis
    if _redis is None:
        _redis = RedisConnection()
        await _redis.connect()
    return _redis


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.close()
        _redis = None
