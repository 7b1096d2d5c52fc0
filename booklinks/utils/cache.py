"""Redis caching for statistics and Google Books search results.

The cache is optional: when Redis is unreachable every lookup is a miss and
every write is a no-op, so callers never need to special-case it.
"""

import hashlib
import json
from typing import Any

import redis.asyncio as redis

from booklinks.config import get_settings
from booklinks.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

STATS_CACHE_KEY = "stats:overview"


class RedisCache:
    """Async Redis cache client with JSON serialization."""

    def __init__(self) -> None:
        self._client: redis.Redis | None = None
        self._connected = False

    async def _get_client(self) -> redis.Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(
                str(settings.redis_url),
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> bool:
        """Test Redis connection."""
        try:
            client = await self._get_client()
            await client.ping()
            self._connected = True
            return True
        except Exception as e:
            logger.warning(f"Redis cache unavailable: {e}")
            self._connected = False
            return False

    async def ping(self) -> bool:
        """Ping Redis to check connection health."""
        client = await self._get_client()
        return await client.ping()

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._connected = False

    async def get(self, key: str) -> Any | None:
        """Get a cached value, None if missing, expired or Redis is down."""
        if not self._connected:
            return None

        try:
            client = await self._get_client()
            data = await client.get(key)
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.debug(f"Cache get error for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a JSON-serializable value with a TTL."""
        if not self._connected:
            return False

        try:
            client = await self._get_client()
            await client.setex(key, ttl_seconds, json.dumps(value, default=str))
            return True
        except Exception as e:
            logger.debug(f"Cache set error for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Delete value from cache."""
        if not self._connected:
            return False

        try:
            client = await self._get_client()
            await client.delete(key)
            return True
        except Exception as e:
            logger.debug(f"Cache delete error for {key}: {e}")
            return False


# Global cache instance
cache = RedisCache()


def make_cache_key(namespace: str, *parts: Any) -> str:
    """Build a ``namespace:part:part`` key, hashed when it gets long."""
    key_str = ":".join([namespace, *(str(p).lower() for p in parts if p is not None)])
    if len(key_str) > 200:
        key_str = f"{namespace}:{hashlib.md5(key_str.encode()).hexdigest()[:12]}"
    return key_str


async def invalidate_stats_cache() -> None:
    """Drop cached statistics after books or references change."""
    await cache.delete(STATS_CACHE_KEY)
