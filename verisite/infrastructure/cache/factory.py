"""Selection of the cache backend."""

import logging

from ...domain.ports.cache_store import CacheStore
from ..config import VerificationSettings
from .memory_cache import MemoryCacheStore
from .redis_cache import RedisCacheStore

logger = logging.getLogger(__name__)


def create_cache_store(settings: VerificationSettings) -> CacheStore:
    """Use Redis when a URL is configured, otherwise an in-process cache."""
    if settings.redis_url:
        logger.info("🗄️ Using Redis cache store")
        return RedisCacheStore(settings.redis_url)
    logger.info(f"🗄️ Using in-memory cache store (maxsize={settings.cache_maxsize})")
    return MemoryCacheStore(maxsize=settings.cache_maxsize)
