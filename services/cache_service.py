"""Key/value cache with a Redis backend and an in-process fallback.

Holds the rate limiter's request windows. Values are JSON-serialized for Redis
and stored as-is locally.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from config import settings

logger = structlog.get_logger()

CLEANUP_INTERVAL = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheService:
    """Redis when ``REDIS_URL`` is configured and reachable, a local dict otherwise."""

    def __init__(self, default_ttl: Optional[int] = None):
        self.redis_client: Optional[redis.Redis] = None
        self.local_cache: Dict[str, Dict[str, Any]] = {}
        self.default_ttl = default_ttl or settings.cache_default_ttl

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client else "local"

    async def initialize(self):
        """Connect to Redis; stay on the local cache when it is not configured or not reachable."""
        if not settings.redis_url:
            logger.info("Redis not configured, using local cache only")
            return
        client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning("Failed to connect to Redis, falling back to local cache", error=str(e))
            await client.aclose()
            return
        self.redis_client = client
        logger.info("Redis cache initialized")

    async def close(self):
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None

    def _local_get(self, key: str) -> Any:
        entry = self.local_cache.get(key)
        if entry is None:
            return None
        if entry["expires_at"] <= _utcnow():
            del self.local_cache[key]
            return None
        return entry["value"]

    async def get(self, key: str, default: Any = None) -> Any:
        if self.redis_client:
            try:
                value = await self.redis_client.get(key)
                return json.loads(value) if value is not None else default
            except RedisError as e:
                logger.warning("Redis get failed", key=key, error=str(e))

        value = self._local_get(key)
        return default if value is None else value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl or self.default_ttl
        if self.redis_client:
            try:
                await self.redis_client.setex(key, ttl, json.dumps(value, default=str))
                return
            except RedisError as e:
                logger.warning("Redis set failed", key=key, error=str(e))

        self.local_cache[key] = {"value": value, "expires_at": _utcnow() + timedelta(seconds=ttl)}

        # Sweep expired entries periodically
        if len(self.local_cache) % CLEANUP_INTERVAL == 0:
            self._cleanup_local_cache()

    async def delete(self, key: str) -> bool:
        deleted = False
        if self.redis_client:
            try:
                deleted = await self.redis_client.delete(key) > 0
            except RedisError as e:
                logger.warning("Redis delete failed", key=key, error=str(e))
        if self.local_cache.pop(key, None) is not None:
            deleted = True
        return deleted

    def _cleanup_local_cache(self) -> None:
        """Drop every expired entry from the local cache."""
        now = _utcnow()
        expired_keys = [key for key, entry in self.local_cache.items() if entry["expires_at"] <= now]
        for key in expired_keys:
            del self.local_cache[key]
        if expired_keys:
            logger.debug("Cleaned up expired cache entries", count=len(expired_keys))

    def clear_local(self) -> None:
        self.local_cache.clear()


# Global cache service instance
cache_service = CacheService()
