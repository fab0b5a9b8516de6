import json
import time
from typing import Any, Optional
import redis.asyncio as redis
from redis.exceptions import RedisError

from common.core.config import settings
from .interface import CacheInterface
from common.core.otel_axiom_exporter import get_logger, trace_span

logger = get_logger(__name__)


class RedisCache(CacheInterface):
    """
    Redis-backed cache shared by all API workers.

    Values are stored as JSON under ``<redis_key_prefix>:<key>``. When Redis is
    unreachable every call degrades to a miss, and a new connection is only
    attempted once ``redis_retry_interval`` has passed.
    """

    def __init__(self, prefix: Optional[str] = None):
        self._prefix = prefix if prefix is not None else settings.redis_key_prefix
        self._client: Optional[redis.Redis] = None
        self._retry_after = 0.0

    def _namespaced(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    async def _client_or_none(self) -> Optional[redis.Redis]:
        if self._client is not None:
            return self._client
        if time.monotonic() < self._retry_after:
            return None

        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            db=settings.redis_db,
            socket_timeout=settings.redis_socket_timeout,
            decode_responses=True,
        )
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            self._retry_after = time.monotonic() + settings.redis_retry_interval
            logger.error(
                f"Redis cache unavailable, retrying in {settings.redis_retry_interval:.0f}s: {e}",
                extra={"redis_host": settings.redis_host, "error": str(e)},
            )
            await client.aclose()
            return None

        logger.info("Redis cache provider connected")
        self._client = client
        return client

    async def _drop_client(self) -> None:
        # Next call reconnects once the retry interval has passed
        if self._client is not None:
            await self._client.aclose()
        self._client = None
        self._retry_after = time.monotonic() + settings.redis_retry_interval

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis cache provider disconnected")

    @trace_span
    async def get(self, key: str) -> Optional[Any]:
        client = await self._client_or_none()
        if client is None:
            return None

        try:
            value = await client.get(self._namespaced(key))
        except (RedisError, OSError) as e:
            logger.error(f"Error reading cache key {key}: {e}")
            await self._drop_client()
            return None

        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            logger.error(f"Discarding undecodable cache value for key {key}: {e}")
            return None

    @trace_span
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        client = await self._client_or_none()
        if client is None:
            return False

        try:
            return bool(
                await client.set(
                    self._namespaced(key), json.dumps(value, default=str), ex=ttl or None
                )
            )
        except (RedisError, OSError) as e:
            logger.error(f"Error writing cache key {key}: {e}")
            await self._drop_client()
            return False

    @trace_span
    async def delete(self, key: str) -> bool:
        client = await self._client_or_none()
        if client is None:
            return False

        try:
            return bool(await client.delete(self._namespaced(key)))
        except (RedisError, OSError) as e:
            logger.error(f"Error deleting cache key {key}: {e}")
            await self._drop_client()
            return False
