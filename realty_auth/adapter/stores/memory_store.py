"""
Process-local stores. State is lost on restart and is not shared between
instances; use the Redis stores for multi-instance deployments.
"""

import threading
from typing import Dict, Optional

from realty_auth.app.services.stores import RateLimitEntry, RateLimitStore, TokenStore


class InMemoryTokenStore(TokenStore):
    def __init__(self):
        self._tokens: Dict[str, float] = {}
        self._lock = threading.Lock()

    async def put(self, token: str, expires: float) -> None:
        with self._lock:
            self._tokens[token] = expires

    async def pop(self, token: str) -> Optional[float]:
        with self._lock:
            return self._tokens.pop(token, None)

    async def sweep(self, now: float) -> int:
        with self._lock:
            expired = [token for token, expires in self._tokens.items() if now > expires]
            for token in expired:
                del self._tokens[token]
            return len(expired)

    def __len__(self) -> int:
        return len(self._tokens)


class InMemoryRateLimitStore(RateLimitStore):
    def __init__(self):
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return RateLimitEntry(count=entry.count, reset_time=entry.reset_time)

    async def hit(self, key: str, window_seconds: float, now: float) -> RateLimitEntry:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now > entry.reset_time:
                entry = RateLimitEntry(count=1, reset_time=now + window_seconds)
                self._entries[key] = entry
            else:
                entry.count += 1
            return RateLimitEntry(count=entry.count, reset_time=entry.reset_time)

    async def sweep(self, now: float) -> int:
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now > entry.reset_time]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
