from datetime import timedelta

import pytest

from services import cache_service as cache_module
from services.cache_service import CLEANUP_INTERVAL, CacheService
from services.rate_limiter import RateLimiter


@pytest.mark.asyncio
async def test_local_entries_expire_on_read(mocker):
    cache = CacheService(default_ttl=1)
    await cache.set("greeting", "hello")
    assert await cache.get("greeting") == "hello"

    later = cache_module._utcnow() + timedelta(seconds=2)
    mocker.patch("services.cache_service._utcnow", return_value=later)

    assert await cache.get("greeting", "gone") == "gone"
    assert "greeting" not in cache.local_cache


@pytest.mark.asyncio
async def test_expired_entries_are_swept_without_being_read(mocker):
    cache = CacheService(default_ttl=1)
    for i in range(CLEANUP_INTERVAL - 1):
        await cache.set(f"key:{i}", i)

    later = cache_module._utcnow() + timedelta(seconds=2)
    mocker.patch("services.cache_service._utcnow", return_value=later)
    await cache.set("fresh", "value")

    assert list(cache.local_cache) == ["fresh"]


@pytest.mark.asyncio
async def test_rate_limit_windows_for_many_clients_do_not_accumulate(mocker):
    cache = CacheService(default_ttl=1)
    limiter = RateLimiter(cache=cache)
    for i in range(5 * CLEANUP_INTERVAL):
        await limiter.check(f"ip:10.0.{i // 256}.{i % 256}", limit=10, window_seconds=1)
    assert len(cache.local_cache) == 5 * CLEANUP_INTERVAL

    later = cache_module._utcnow() + timedelta(seconds=120)
    mocker.patch("services.cache_service._utcnow", return_value=later)
    for i in range(CLEANUP_INTERVAL):
        await limiter.check(f"ip:192.168.0.{i}", limit=10, window_seconds=1)

    assert len(cache.local_cache) < CLEANUP_INTERVAL + 1
