"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from redis.exceptions import RedisError

from shortlink_app.exceptions import CacheError

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    The cache is disposable: a miss only costs an extra store read.
    Transport failures are raised as CacheError so the caller decides
    whether they matter (request path) or only get logged (backfill).

    All methods are async because cache operations involve I/O (network for Redis).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None on a miss
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int) -> None:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds
        """
        pass

    async def close(self) -> None:
        """Release any connection held by the cache."""


class RedisCache(CacheStrategy):
    """
    Redis cache implementation on the asyncio client.

    Entries are written with SET ... EX, so Redis owns expiry.
    Reads never touch the TTL (no sliding expiration).
    """

    def __init__(self, redis_client):
        """
        Initialize Redis cache.

        Args:
            redis_client: redis.asyncio.Redis instance with decode_responses=True
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error: {e}") from e

    async def set(self, key: str, value: str, ttl: int) -> None:
        try:
            await self.redis.set(key, value, ex=ttl)
        except RedisError as e:
            raise CacheError(f"Redis set error: {e}") from e

    async def close(self) -> None:
        await self.redis.aclose()


class InMemoryCache(CacheStrategy):
    """
    In-memory cache implementation using Python dict.

    Expiry is checked lazily on read against a monotonic clock.
    Not shared between processes; meant for development and tests.
    """

    def __init__(self, clock=time.monotonic):
        self._cache: Dict[str, Tuple[str, float]] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._cache[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._cache[key] = (value, self._clock() + ttl)


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup is a miss, so every redirect goes to the store.
    """

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int) -> None:
        return None
