"""Caches de resposta (memória e Redis)."""
import json

import pytest

from football_proxy.cache import CachedResponse, MemoryResponseCache, RedisResponseCache

from conftest import BrokenKV


ENTRY = CachedResponse(body=b'{"results": 1}', status=200, headers={"X-Cache": "MISS"})


@pytest.mark.asyncio
async def test_memory_cache_expires_after_ttl(memory_cache, clock):
    await memory_cache.put("k", ENTRY, ttl=60)

    clock.advance(59)
    assert await memory_cache.get("k") == ENTRY

    clock.advance(1)
    assert await memory_cache.get("k") is None
    assert len(memory_cache) == 0


@pytest.mark.asyncio
async def test_redis_cache_uses_prefix(kv):
    cache = RedisResponseCache(kv)
    await cache.put("https://proxy.test/?endpoint=fixtures", ENTRY, ttl=60)

    raw = kv.data["proxy-cache:https://proxy.test/?endpoint=fixtures"]
    assert json.loads(raw)["status"] == 200
    assert await cache.get("https://proxy.test/?endpoint=fixtures") == ENTRY


@pytest.mark.asyncio
async def test_redis_cache_ignores_invalid_entry(kv):
    kv.data["proxy-cache:k"] = '{"body": "x"}'
    assert await RedisResponseCache(kv).get("k") is None


@pytest.mark.asyncio
async def test_memory_cache_sweeps_expired_on_put(memory_cache, clock):
    for i in range(1000):
        await memory_cache.put(f"https://proxy.test/?endpoint=fixtures&_={i}", ENTRY, ttl=60)

    clock.advance(3600)
    await memory_cache.put("https://proxy.test/?endpoint=fixtures", ENTRY, ttl=60)

    assert len(memory_cache) == 1


@pytest.mark.asyncio
async def test_redis_cache_read_failure_is_a_miss():
    assert await RedisResponseCache(BrokenKV()).get("k") is None
