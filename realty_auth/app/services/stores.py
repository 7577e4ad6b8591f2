"""
Expiring key/value stores backing CSRF tokens and rate-limit counters.

Each operation is atomic per key so single-use and counting guarantees hold
under concurrent requests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float  # epoch seconds


class TokenStore(ABC):
    """Single-use token records keyed by the token itself"""

    @abstractmethod
    async def put(self, token: str, expires: float) -> None:
        """Store a token that expires at the given epoch seconds"""
        pass

    @abstractmethod
    async def pop(self, token: str) -> Optional[float]:
        """Remove the token and return its expiry, or None if unknown"""
        pass

    @abstractmethod
    async def sweep(self, now: float) -> int:
        """Drop expired tokens, returning how many were removed"""
        pass


class RateLimitStore(ABC):
    """Fixed-window request counters"""

    @abstractmethod
    async def get(self, key: str) -> Optional[RateLimitEntry]:
        pass

    @abstractmethod
    async def hit(self, key: str, window_seconds: float, now: float) -> RateLimitEntry:
        """
        Count one request.

        Starts a new window with count 1 when the key is unknown or its window
        ended before now; otherwise increments the count.
        """
        pass

    @abstractmethod
    async def sweep(self, now: float) -> int:
        pass
