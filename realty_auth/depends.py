from typing import Dict, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from realty_auth.libs.result import Error
from realty_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from realty_auth.api.error import ClientError, RateLimitExceeded
from realty_auth.api.utils.csrf import CsrfGuard
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.api.utils.rate_limit import RateLimiter
from realty_auth.app.services.email_sender import EmailSender

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# The gatekeeper answers missing tokens itself, so no auto 403 here
security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_csrf_guard(request: Request) -> CsrfGuard:
    return request.app.state.csrf_guard


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_rate_limiters(request: Request) -> Dict[str, RateLimiter]:
    return request.app.state.rate_limiters


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_codec: TokenCodec = Depends(get_token_codec),
) -> dict:
    """
    Dependency returning the verified access token claims.

    The gatekeeper verifies bearer tokens on protected auth routes and leaves
    the claims on request.state; anything else is verified here.

    Returns:
        Decoded JWT payload containing userId and email

    Raises:
        ClientError: 401 if the token is missing, invalid or expired
    """
    claims = getattr(request.state, "token_claims", None)
    if claims is not None:
        return claims

    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Access token is required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = token_codec.verify(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Invalid or expired access token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload


def rate_limit(policy_name: str):
    """Route-level rate limit on top of the gatekeeper's per-path policy"""

    async def dependency(
        request: Request,
        rate_limiters: Dict[str, RateLimiter] = Depends(get_rate_limiters),
    ) -> None:
        response = await rate_limiters[policy_name].check(request)
        if response is not None:
            raise RateLimitExceeded(response)

    return dependency
