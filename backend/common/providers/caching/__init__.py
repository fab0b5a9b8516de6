from .interface import CacheInterface
from .decorators import cache
from .factory import get_cache_provider, close_cache_provider
from .redis_cache import RedisCache
from .memory_cache import MemoryCache
from .passthrough_cache import PassthroughCache

__all__ = [
    "CacheInterface",
    "cache",
    "get_cache_provider",
    "close_cache_provider",
    "RedisCache",
    "MemoryCache",
    "PassthroughCache",
]
