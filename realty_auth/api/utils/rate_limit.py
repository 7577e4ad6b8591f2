"""
Fixed-window rate limiting.

A window opens on the first request for an identifier and closes
window_seconds later; the next request after that opens a fresh window with
count 1. This is a reset, not a rolling window: a client can squeeze up to
twice max_attempts requests around a window boundary.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse

from realty_auth.app.services.stores import RateLimitStore

logger = logging.getLogger(__name__)

CLIENT_IP_HEADERS = (
    "x-forwarded-for",
    "x-real-ip",
    "cf-connecting-ip",
    "x-forwarded",
    "x-cluster-client-ip",
)

SWEEP_INTERVAL_SECONDS = 60


@dataclass(frozen=True)
class RateLimitPolicy:
    name: str
    key_prefix: str
    max_attempts: int
    window_seconds: int


POLICIES: Dict[str, RateLimitPolicy] = {
    "login": RateLimitPolicy("login", "login", 5, 15 * 60),
    "register": RateLimitPolicy("register", "register", 3, 60 * 60),
    "password_reset": RateLimitPolicy("password_reset", "password_reset", 3, 60 * 60),
    "email_verification": RateLimitPolicy("email_verification", "email_verification", 5, 60 * 60),
    "general": RateLimitPolicy("general", "auth_general", 60, 60),
    "create_video": RateLimitPolicy("create_video", "create_video", 5, 60),
}


def client_ip(request: Request) -> str:
    for header in CLIENT_IP_HEADERS:
        value = request.headers.get(header)
        if value:
            # X-Forwarded-For lists the originating client first
            return value.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def client_identifier(request: Request) -> str:
    """Per-client, per-route identity: ip, user agent and path"""
    user_agent = request.headers.get("user-agent") or "unknown"
    return f"{client_ip(request)}:{user_agent}:{request.url.path}"


class RateLimiter:
    """Counts requests per identifier for one policy"""

    def __init__(
        self,
        policy: RateLimitPolicy,
        store: RateLimitStore,
        clock: Callable[[], float] = time.time,
    ):
        self.policy = policy
        self.store = store
        self.clock = clock
        self._last_sweep = clock()

    def key_for(self, request: Request) -> str:
        return f"{self.policy.key_prefix}:{client_identifier(request)}"

    async def is_limited(self, identifier: str) -> bool:
        now = self.clock()
        await self._maybe_sweep(now)
        entry = await self.store.hit(identifier, self.policy.window_seconds, now)
        return entry.count > self.policy.max_attempts

    async def remaining(self, identifier: str) -> int:
        entry = await self.store.get(identifier)
        if entry is None or self.clock() > entry.reset_time:
            return self.policy.max_attempts
        return max(0, self.policy.max_attempts - entry.count)

    async def reset_time(self, identifier: str) -> float:
        now = self.clock()
        entry = await self.store.get(identifier)
        if entry is None or now > entry.reset_time:
            return now + self.policy.window_seconds
        return entry.reset_time

    async def check(self, request: Request) -> Optional[JSONResponse]:
        """Count the request; return a 429 response when it is over the limit"""
        identifier = self.key_for(request)
        if not await self.is_limited(identifier):
            return None

        remaining = await self.remaining(identifier)
        reset_time = await self.reset_time(identifier)
        reset_ms = int(reset_time * 1000)
        retry_after = max(0, math.ceil(reset_time - self.clock()))

        logger.warning(
            f"Rate limit '{self.policy.name}' exceeded for {request.method} {request.url.path}"
        )
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "message": "Too many requests. Please try again later.",
                "data": {"remainingAttempts": remaining, "resetTime": reset_ms},
            },
            headers={
                "X-RateLimit-Limit": str(self.policy.max_attempts),
                "X-RateLimit-Remaining": str(remaining),
                "X-RateLimit-Reset": str(reset_ms),
                "Retry-After": str(retry_after),
            },
        )

    async def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < SWEEP_INTERVAL_SECONDS:
            return
        self._last_sweep = now
        swept = await self.store.sweep(now)
        if swept:
            logger.debug(f"Swept {swept} expired rate limit entries")


def build_rate_limiters(
    store: RateLimitStore, clock: Callable[[], float] = time.time
) -> Dict[str, RateLimiter]:
    return {name: RateLimiter(policy, store, clock) for name, policy in POLICIES.items()}
