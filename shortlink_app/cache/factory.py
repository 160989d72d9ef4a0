"""
Factory for creating cache instances.
"""

import logging
from enum import Enum

import redis
import redis.asyncio as aioredis

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from shortlink_app.config import Settings

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for creating cache instances from settings.

    The application context owns the instance it gets back;
    the factory keeps no state of its own.
    """

    @classmethod
    def create(cls, backend: CacheBackend, settings: Settings) -> CacheStrategy:
        """
        Create a cache instance.

        Args:
            backend: Type of cache backend (from enum)
            settings: Application settings (Redis URL)

        Returns:
            CacheStrategy instance
        """
        if backend == CacheBackend.REDIS:
            try:
                # Test connection once, synchronously, before committing to Redis
                probe = redis.from_url(
                    settings.redis_url,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                try:
                    probe.ping()
                finally:
                    probe.close()
            except redis.exceptions.RedisError as e:
                logger.warning("Redis connection failed: %s", e)
                logger.warning("Falling back to in-memory cache")
                return InMemoryCache()

            client = aioredis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("Redis cache initialized")
            return RedisCache(client)

        if backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache()

        if backend == CacheBackend.NULL:
            logger.info("Null cache initialized")
            return NullCache()

        raise ValueError(f"Unknown cache backend: {backend}")
