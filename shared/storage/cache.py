"""
Cache Layer - Redis-backed hot cache.

Sits in front of the Supabase cache tables and holds small per-client
records (anonymous usage counters, recent topics). Values are JSON.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)


@dataclass
class CacheConfig:
    """Cache configuration."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    enabled: bool = True
    default_ttl_seconds: int = 300  # 5 minutes
    prefix: str = "quartz:"


class CacheLayer:
    """
    Redis-backed caching layer with an in-process fallback.

    Usage:
        cache = CacheLayer()
        cache.set("article:photosynthesis", {"content": "..."}, ttl=60)
        value = cache.get("article:photosynthesis")
    """

    def __init__(self, config: Optional[CacheConfig] = None):
        """
        Initialize cache layer.

        Args:
            config: Optional cache configuration
        """
        self.config = config or CacheConfig()
        self._client: Optional[redis.Redis] = None
        self._fallback: dict[str, tuple[Any, float]] = {}

        if self.config.enabled:
            try:
                self._client = redis.Redis(
                    host=self.config.host,
                    port=self.config.port,
                    db=self.config.db,
                    password=self.config.password,
                    decode_responses=True,
                    socket_timeout=5,
                )
                self._client.ping()
                logger.info("Redis cache connected: %s:%s", self.config.host, self.config.port)
            except redis.RedisError as e:
                logger.warning("Redis unavailable, using in-memory fallback: %s", e)
                self._client = None

    @property
    def backend(self) -> str:
        return "redis" if self._client else "in-memory"

    def _make_key(self, key: str) -> str:
        """Create prefixed cache key."""
        return f"{self.config.prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        cache_key = self._make_key(key)

        if self._client:
            try:
                value = self._client.get(cache_key)
                if value:
                    return json.loads(value)
            except redis.RedisError as e:
                logger.debug("Cache get error: %s", e)

        if cache_key in self._fallback:
            value, expires = self._fallback[cache_key]
            if time.time() < expires:
                return value
            del self._fallback[cache_key]

        return None

    def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl: Time-to-live in seconds

        Returns:
            True if stored
        """
        cache_key = self._make_key(key)
        ttl = ttl or self.config.default_ttl_seconds

        try:
            serialized = json.dumps(value)
        except TypeError:
            logger.warning("Value not JSON serializable: %s", key)
            return False

        if self._client:
            try:
                self._client.setex(cache_key, ttl, serialized)
                return True
            except redis.RedisError as e:
                logger.debug("Cache set error: %s", e)

        self._fallback[cache_key] = (value, time.time() + ttl)
        return True

    def ping(self) -> bool:
        """True when the backend answers; the in-memory fallback always does."""
        if not self._client:
            return True
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False


# Singleton instance
_cache: Optional[CacheLayer] = None


def get_cache(config: Optional[CacheConfig] = None) -> CacheLayer:
    """Get or create singleton cache layer."""
    global _cache
    if _cache is None:
        _cache = CacheLayer(config)
    return _cache


def reset_cache() -> None:
    """Drop the singleton (used by app shutdown and tests)."""
    global _cache
    _cache = None
