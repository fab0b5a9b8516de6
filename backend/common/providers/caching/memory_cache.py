import time
from collections import OrderedDict
from typing import Any, Optional, Tuple

from .interface import CacheInterface
from common.core.config import settings
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)


class MemoryCache(CacheInterface):
    """
    Process-local LRU cache for local development and single-worker deployments.

    Holds at most ``max_entries`` keys; the least recently used key is evicted
    first. Expired entries are dropped when read.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries or settings.cache_memory_max_entries
        # key -> (value, expires_at or None)
        self._entries: "OrderedDict[str, Tuple[Any, Optional[float]]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and time.time() > expires_at:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        self._entries[key] = (value, time.time() + ttl if ttl else None)
        self._entries.move_to_end(key)

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache key {evicted}")
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None
