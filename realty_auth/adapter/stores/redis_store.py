"""
Redis-backed stores shared by every instance of the service.

Expiry is delegated to Redis key TTLs, so sweeping is a no-op.
"""

import logging
import time
from typing import Optional

import redis.asyncio as aioredis

from realty_auth.app.services.stores import RateLimitEntry, RateLimitStore, TokenStore

logger = logging.getLogger(__name__)


def create_redis_client(redis_url: str) -> aioredis.Redis:
    return aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)


class RedisTokenStore(TokenStore):
    def __init__(self, client: aioredis.Redis, namespace: str = "csrf"):
        self.client = client
        self.namespace = namespace

    def _key(self, token: str) -> str:
        return f"{self.namespace}:{token}"

    async def put(self, token: str, expires: float) -> None:
        ttl_ms = max(1, int((expires - time.time()) * 1000))
        await self.client.set(self._key(token), str(expires), px=ttl_ms)

    async def pop(self, token: str) -> Optional[float]:
        # GETDEL keeps read-and-delete atomic across instances
        value = await self.client.getdel(self._key(token))
        if value is None:
            return None
        return float(value)

    async def sweep(self, now: float) -> int:
        return 0


class RedisRateLimitStore(RateLimitStore):
    def __init__(self, client: aioredis.Redis, namespace: str = "ratelimit"):
        self.client = client
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[RateLimitEntry]:
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.get(self._key(key))
            pipe.pttl(self._key(key))
            count, ttl_ms = await pipe.execute()

        if count is None or ttl_ms < 0:
            return None
        return RateLimitEntry(count=int(count), reset_time=time.time() + ttl_ms / 1000)

    async def hit(self, key: str, window_seconds: float, now: float) -> RateLimitEntry:
        redis_key = self._key(key)
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.incr(redis_key)
            pipe.pttl(redis_key)
            count, ttl_ms = await pipe.execute()

        if ttl_ms < 0:
            # First hit of a new window
            ttl_ms = int(window_seconds * 1000)
            await self.client.pexpire(redis_key, ttl_ms)

        return RateLimitEntry(count=int(count), reset_time=now + ttl_ms / 1000)

    async def sweep(self, now: float) -> int:
        return 0
