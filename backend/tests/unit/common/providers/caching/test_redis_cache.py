import json
import pytest
from unittest.mock import AsyncMock, MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError

from common.providers.caching import redis_cache
from common.providers.caching.redis_cache import RedisCache


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.ping = AsyncMock(return_value=True)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def patch_redis(monkeypatch, fake_client):
    factory = MagicMock(return_value=fake_client)
    monkeypatch.setattr(redis_cache.redis, "Redis", factory)
    return factory


class TestRedisCache:
    async def test_keys_are_namespaced(self, patch_redis, fake_client):
        cache = RedisCache(prefix="replydesk")

        await cache.set("subscription:user:u1", {"plan_tier": "pro"}, ttl=300)

        fake_client.set.assert_awaited_once_with(
            "replydesk:subscription:user:u1",
            json.dumps({"plan_tier": "pro"}),
            ex=300,
        )

    async def test_get_decodes_json(self, patch_redis, fake_client):
        fake_client.get.return_value = '{"a": 1}'

        assert await RedisCache(prefix="").get("k") == {"a": 1}
        fake_client.get.assert_awaited_once_with("k")

    async def test_unreachable_redis_is_a_miss_and_backs_off(
        self, patch_redis, fake_client
    ):
        fake_client.ping.side_effect = RedisConnectionError("refused")
        cache = RedisCache()

        assert await cache.get("k") is None
        assert await cache.set("k", 1) is False

        # Second call is inside the retry interval: no new connection attempt
        assert patch_redis.call_count == 1

    async def test_command_failure_drops_client(self, patch_redis, fake_client):
        fake_client.get.side_effect = RedisConnectionError("reset")
        cache = RedisCache()

        assert await cache.get("k") is None
        fake_client.aclose.assert_awaited()
        assert await cache.get("k") is None
        assert patch_redis.call_count == 1
