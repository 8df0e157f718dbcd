"""Redis-backed cache store."""

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ...domain.ports.cache_store import CacheStore

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStore):
    """Cache store shared across processes through Redis.

    Connection and protocol failures are logged and reported as a miss or
    a failed write; they never reach the caller.
    """

    def __init__(self, redis_url: str, client: Optional[aioredis.Redis] = None):
        """Initialize the store.

        Args:
            redis_url: Redis connection URL
            client: Optional pre-built client
        """
        self._redis = client or aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            logger.warning(f"⚠️ Redis get failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"⚠️ Unreadable cache entry {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        if ttl_seconds <= 0:
            return False
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning(f"⚠️ Value for {key} is not cacheable: {e}")
            return False
        try:
            await self._redis.setex(key, ttl_seconds, payload)
        except RedisError as e:
            logger.warning(f"⚠️ Redis set failed for {key}: {e}")
            return False
        return True

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._redis.delete(key))
        except RedisError as e:
            logger.warning(f"⚠️ Redis delete failed for {key}: {e}")
            return False

    async def clear(self) -> bool:
        try:
            await self._redis.flushdb()
        except RedisError as e:
            logger.warning(f"⚠️ Redis flush failed: {e}")
            return False
        return True

    async def stats(self) -> Dict[str, Any]:
        try:
            size = await self._redis.dbsize()
        except RedisError as e:
            logger.warning(f"⚠️ Redis stats failed: {e}")
            return {"backend": "redis", "connected": False}
        return {"backend": "redis", "connected": True, "size": size}

    async def close(self) -> None:
        try:
            await self._redis.aclose()
        except RedisError as e:
            logger.warning(f"⚠️ Redis close failed: {e}")
