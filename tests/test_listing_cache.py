"""Temple listing cache."""

import pytest

from helpers import FakeRedis
from templecloud.services.listing_cache import TempleListingCache


class BrokenRedis(FakeRedis):
    async def get(self, key):
        raise ConnectionError("redis down")

    async def set(self, key, value, ex=None):
        raise ConnectionError("redis down")

    async def delete(self, key):
        raise ConnectionError("redis down")


@pytest.mark.asyncio
async def test_round_trip_and_invalidate():
    cache = TempleListingCache(FakeRedis(), ttl_seconds=60)
    await cache.set("user_1", [{"slug": "tian-tan"}])
    assert await cache.get("user_1") == [{"slug": "tian-tan"}]

    await cache.invalidate("user_1")
    assert await cache.get("user_1") is None


@pytest.mark.asyncio
async def test_without_redis_every_call_is_a_no_op():
    cache = TempleListingCache(None)
    await cache.set("user_1", [{"slug": "x"}])
    await cache.invalidate("user_1")
    assert await cache.get("user_1") is None


@pytest.mark.asyncio
async def test_redis_errors_degrade_to_cache_misses():
    cache = TempleListingCache(BrokenRedis())
    await cache.set("user_1", [])
    await cache.invalidate("user_1")
    assert await cache.get("user_1") is None
