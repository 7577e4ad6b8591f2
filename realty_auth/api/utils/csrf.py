"""
Server-side CSRF tokens.

A token is issued by GET /auth/csrf-token, sent back in the X-CSRF-Token
header of a state-changing request and deleted as soon as it validates.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable

from realty_auth.app.services.stores import TokenStore

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
TOKEN_BYTES = 32
DEFAULT_TOKEN_TTL_SECONDS = 24 * 60 * 60


@dataclass
class CsrfToken:
    token: str
    expires: float  # epoch seconds


class CsrfGuard:
    """
    Issues single-use anti-forgery tokens and validates them.

    The token store is injected so tests get an isolated store and
    multi-instance deployments can share one.
    """

    def __init__(
        self,
        store: TokenStore,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    async def issue_token(self) -> CsrfToken:
        now = self.clock()
        token = secrets.token_hex(TOKEN_BYTES)
        expires = now + self.ttl_seconds
        await self.store.put(token, expires)

        swept = await self.store.sweep(now)
        if swept:
            logger.debug(f"Swept {swept} expired CSRF tokens")

        return CsrfToken(token=token, expires=expires)

    async def validate(self, token: str) -> bool:
        """
        Validate and consume a token.

        Unknown, empty and expired tokens are rejected; expired ones are
        removed on the way. A token validates at most once.
        """
        if not token:
            return False

        expires = await self.store.pop(token)
        if expires is None:
            return False

        return self.clock() <= expires
