import asyncio

import pytest

from realty_auth.adapter.stores import InMemoryRateLimitStore, InMemoryTokenStore


@pytest.mark.asyncio
async def test_token_pop_removes_the_token():
    store = InMemoryTokenStore()
    await store.put("abc", 100.0)

    assert await store.pop("abc") == 100.0
    assert await store.pop("abc") is None


@pytest.mark.asyncio
async def test_token_sweep_only_drops_expired():
    store = InMemoryTokenStore()
    await store.put("old", 10.0)
    await store.put("fresh", 500.0)

    assert await store.sweep(now=100.0) == 1
    assert await store.pop("fresh") == 500.0


@pytest.mark.asyncio
async def test_rate_limit_hit_opens_and_extends_window():
    store = InMemoryRateLimitStore()

    first = await store.hit("k", window_seconds=60, now=1000.0)
    second = await store.hit("k", window_seconds=60, now=1030.0)

    assert (first.count, first.reset_time) == (1, 1060.0)
    assert (second.count, second.reset_time) == (2, 1060.0)


@pytest.mark.asyncio
async def test_rate_limit_hit_after_window_starts_over():
    store = InMemoryRateLimitStore()
    await store.hit("k", window_seconds=60, now=1000.0)
    await store.hit("k", window_seconds=60, now=1001.0)

    entry = await store.hit("k", window_seconds=60, now=1061.0)

    assert (entry.count, entry.reset_time) == (1, 1121.0)


@pytest.mark.asyncio
async def test_rate_limit_get_returns_a_copy():
    store = InMemoryRateLimitStore()
    await store.hit("k", window_seconds=60, now=1000.0)

    entry = await store.get("k")
    entry.count = 99

    assert (await store.get("k")).count == 1
    assert await store.get("missing") is None


@pytest.mark.asyncio
async def test_concurrent_hits_are_all_counted():
    store = InMemoryRateLimitStore()

    await asyncio.gather(*(store.hit("k", window_seconds=60, now=1000.0) for _ in range(50)))

    assert (await store.get("k")).count == 50


@pytest.mark.asyncio
async def test_rate_limit_sweep():
    store = InMemoryRateLimitStore()
    await store.hit("old", window_seconds=10, now=1000.0)
    await store.hit("fresh", window_seconds=600, now=1000.0)

    assert await store.sweep(now=1100.0) == 1
    assert len(store) == 1
