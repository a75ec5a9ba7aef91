"""
Redis cache management.
Holds the shared connection and the unread-count cache helpers.

Without a configured redis_url every operation is a no-op miss, so the
server runs (and tests run) without Redis.
"""
import json
import logging
from typing import Any, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from app.config import settings

logger = logging.getLogger(__name__)


class RedisCache:
    """Redis cache manager with connection pooling."""

    def __init__(self):
        self.redis: Optional[aioredis.Redis] = None

    async def connect(self) -> None:
        """Establish connection to Redis."""
        if not settings.redis_url:
            logger.info("No Redis URL provided - running without Redis cache")
            self.redis = None
            return

        try:
            self.redis = aioredis.from_url(
                settings.redis_url,
                password=settings.redis_password or None,
                encoding="utf-8",
                decode_responses=True,
                max_connections=50,
            )
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except (RedisError, OSError) as e:
            logger.warning(f"Could not connect to Redis, running without cache: {e}")
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        if not self.redis:
            return None

        try:
            value = await self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache with optional TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds

        Returns:
            True if successful
        """
        if not self.redis:
            return False

        value = json.dumps(value)
        try:
            if ttl:
                return bool(await self.redis.setex(key, ttl, value))
            return bool(await self.redis.set(key, value))
        except RedisError as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            return False

    async def delete(self, *keys: str) -> bool:
        """Delete keys from cache."""
        if not self.redis or not keys:
            return False

        try:
            return bool(await self.redis.delete(*keys))
        except RedisError as e:
            logger.warning(f"Cache delete error for keys {keys}: {e}")
            return False


# Global cache instance
cache = RedisCache()


def _unread_key(user_id: str, conversation_id: str) -> str:
    return f"unread:{user_id}:{conversation_id}"


def _total_unread_key(user_id: str) -> str:
    return f"unread:total:{user_id}"


async def cache_unread_count(user_id: str, conversation_id: str, count: int) -> bool:
    """
    Cache the unread count for a user in one conversation.

    Invalidated when the user reads the conversation or a new message
    arrives; the short TTL bounds staleness otherwise.
    """
    return await cache.set(
        _unread_key(user_id, conversation_id), count, ttl=settings.cache_unread_ttl
    )


async def get_cached_unread_count(user_id: str, conversation_id: str) -> Optional[int]:
    """
    Get cached unread count for a user in a conversation.

    Returns:
        Cached count or None if cache miss
    """
    count = await cache.get(_unread_key(user_id, conversation_id))
    return int(count) if count is not None else None


async def cache_total_unread_count(user_id: str, count: int) -> bool:
    """Cache the badge total across all of a user's conversations."""
    return await cache.set(_total_unread_key(user_id), count, ttl=settings.cache_unread_ttl)


async def get_cached_total_unread_count(user_id: str) -> Optional[int]:
    count = await cache.get(_total_unread_key(user_id))
    return int(count) if count is not None else None


async def invalidate_unread_counts(user_id: str, conversation_id: str) -> bool:
    """
    Drop the per-conversation and total unread counts for a user.

    Args:
        user_id: Viewer profile ID
        conversation_id: Conversation whose count changed

    Returns:
        True if anything was deleted
    """
    return await cache.delete(
        _unread_key(user_id, conversation_id), _total_unread_key(user_id)
    )
