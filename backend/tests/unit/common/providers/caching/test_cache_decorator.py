import time
import pytest
from pydantic import BaseModel
from unittest.mock import AsyncMock, patch

from common.providers.caching.decorators import cache
from common.providers.caching.memory_cache import MemoryCache


class Widget(BaseModel):
    id: str
    size: int


class WidgetService:
    def __init__(self):
        self.loads = 0

    @cache(model_type=Widget, ttl=60, key_generator=lambda widget_id: f"widget:{widget_id}")
    async def get(self, widget_id: str):
        self.loads += 1
        if widget_id == "missing":
            return None
        return Widget(id=widget_id, size=3)


@pytest.fixture
def memory_cache(monkeypatch):
    provider = MemoryCache()
    monkeypatch.setattr("common.providers.caching.factory._cache_provider", provider)
    return provider


class TestCacheDecorator:
    async def test_second_call_served_from_cache(self, memory_cache):
        service = WidgetService()

        first = await service.get("w1")
        second = await service.get("w1")

        assert first == second == Widget(id="w1", size=3)
        assert service.loads == 1
        assert await memory_cache.get("widget:w1") == {"id": "w1", "size": 3}

    async def test_none_is_not_cached(self, memory_cache):
        service = WidgetService()

        await service.get("missing")
        await service.get("missing")

        assert service.loads == 2

    async def test_cache_errors_fall_back_to_function(self, memory_cache):
        service = WidgetService()

        with patch.object(memory_cache, "get", AsyncMock(side_effect=ConnectionError())):
            with patch.object(memory_cache, "set", AsyncMock(side_effect=ConnectionError())):
                result = await service.get("w2")

        assert result.id == "w2"

    async def test_default_key_for_plain_function(self, memory_cache):
        calls = []

        @cache(model_type=dict, ttl=60)
        async def lookup(name, flag=False):
            calls.append(name)
            return {"name": name}

        await lookup("a", flag=True)
        await lookup("a", flag=True)
        await lookup("b")

        assert calls == ["a", "b"]


class TestMemoryCache:
    async def test_entries_expire(self, monkeypatch):
        provider = MemoryCache()
        await provider.set("k", 1, ttl=10)

        now = time.time()
        monkeypatch.setattr(time, "time", lambda: now + 11)

        assert await provider.get("k") is None

    async def test_delete(self):
        provider = MemoryCache()
        await provider.set("k", 1)

        assert await provider.delete("k") is True
        assert await provider.delete("k") is False

    async def test_least_recently_used_key_is_evicted(self):
        provider = MemoryCache(max_entries=2)
        await provider.set("a", 1)
        await provider.set("b", 2)
        await provider.get("a")
        await provider.set("c", 3)

        assert len(provider) == 2
        assert await provider.get("b") is None
        assert await provider.get("a") == 1
        assert await provider.get("c") == 3
