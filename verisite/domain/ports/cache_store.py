"""Port interface for the TTL cache used to accelerate aggregation."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class CacheStore(ABC):
    """Key/value store with per-entry time-to-live.

    The cache is a best-effort accelerator. Implementations must never
    raise from these methods: read failures return ``None`` and write
    failures return ``False``.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent, expired or unreadable."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a JSON-serializable value for ``ttl_seconds``."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key."""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """Remove every entry."""
        pass

    @abstractmethod
    async def stats(self) -> Dict[str, Any]:
        """Return backend-specific statistics."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
