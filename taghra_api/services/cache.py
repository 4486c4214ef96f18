import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class CacheService:
    """Redis cache for derived, read-heavy data (leaderboard)

    Failures are logged and reported as misses; the cache is never the
    source of truth.
    """

    def __init__(self, redis_url: str):
        self.redis = redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None"""
        try:
            data = await self.redis.get(key)
            return json.loads(data) if data else None
        except (redis.RedisError, OSError, ValueError) as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store a JSON-serialisable value with a TTL"""
        try:
            await self.redis.setex(key, ttl, json.dumps(value, default=str))
            return True
        except (redis.RedisError, OSError, TypeError) as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            return False

    async def clear_pattern(self, pattern: str) -> int:
        """Delete all keys matching a pattern"""
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern)]
            if keys:
                await self.redis.delete(*keys)
            return len(keys)
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Cache clear pattern error for {pattern}: {e}")
            return 0

    async def close(self) -> None:
        await self.redis.aclose()
