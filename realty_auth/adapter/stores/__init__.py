from .memory_store import InMemoryRateLimitStore, InMemoryTokenStore
from .redis_store import RedisRateLimitStore, RedisTokenStore, create_redis_client

__all__ = [
    "InMemoryRateLimitStore",
    "InMemoryTokenStore",
    "RedisRateLimitStore",
    "RedisTokenStore",
    "create_redis_client",
]
