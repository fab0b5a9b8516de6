from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheInterface(ABC):
    """Interface for cache providers.

    Providers never raise on backend failure: reads degrade to a miss and
    writes report ``False``.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON-serializable value, optionally expiring after ``ttl`` seconds."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    async def close(self) -> None:
        """Release backend connections. No-op for in-process providers."""
        return None
