from typing import Optional

from common.core.config import settings
from common.core.constants import CacheProviderType
from common.core.otel_axiom_exporter import get_logger

from .interface import CacheInterface
from .memory_cache import MemoryCache
from .passthrough_cache import PassthroughCache
from .redis_cache import RedisCache

logger = get_logger(__name__)

_cache_provider: Optional[CacheInterface] = None


def get_cache_provider() -> CacheInterface:
    """Return the process-wide cache provider selected by ``settings.cache_provider``."""
    global _cache_provider

    if _cache_provider is None:
        if settings.cache_provider == CacheProviderType.MEMORY:
            _cache_provider = MemoryCache()
        elif settings.cache_provider == CacheProviderType.PASSTHROUGH:
            _cache_provider = PassthroughCache()
        else:
            _cache_provider = RedisCache()
        logger.info(f"Initialized {settings.cache_provider.value} cache provider")

    return _cache_provider


async def close_cache_provider() -> None:
    global _cache_provider

    if _cache_provider is not None:
        await _cache_provider.close()
    _cache_provider = None
