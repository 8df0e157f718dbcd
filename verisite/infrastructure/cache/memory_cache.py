"""In-process TTL cache store."""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from cachetools import TLRUCache

from ...domain.ports.cache_store import CacheStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A serialized value and the timer reading at which it expires."""

    key: str
    payload: str
    expires_at: float


def _time_to_use(key: str, entry: CacheEntry, now: float) -> float:
    return entry.expires_at


class MemoryCacheStore(CacheStore):
    """Cache store backed by a cachetools ``TLRUCache``.

    Values are kept as JSON text, so every read returns a fresh copy that
    callers can mutate without affecting the cache.
    """

    def __init__(self, maxsize: int = 1000, timer: Callable[[], float] = time.monotonic):
        """Initialize the store.

        Args:
            maxsize: Maximum number of entries kept
            timer: Clock used for expiry
        """
        self._timer = timer
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    async def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None or entry.expires_at <= self._timer():
                self._misses += 1
                return None
            self._hits += 1
        try:
            return json.loads(entry.payload)
        except ValueError as e:
            logger.warning(f"⚠️ Dropping unreadable cache entry {key}: {e}")
            await self.delete(key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        if ttl_seconds <= 0:
            return False
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning(f"⚠️ Value for {key} is not cacheable: {e}")
            return False
        with self._lock:
            self._cache[key] = CacheEntry(key=key, payload=payload, expires_at=self._timer() + ttl_seconds)
        return True

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    async def clear(self) -> bool:
        with self._lock:
            self._cache.clear()
        return True

    async def stats(self) -> Dict[str, Any]:
        with self._lock:
            self._cache.expire()
            return {
                "backend": "memory",
                "size": len(self._cache),
                "maxsize": self._cache.maxsize,
                "hits": self._hits,
                "misses": self._misses,
            }
