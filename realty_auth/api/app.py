import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from realty_auth.adapter.services.email_sender import build_email_sender
from realty_auth.adapter.stores import (
    InMemoryRateLimitStore,
    InMemoryTokenStore,
    RedisRateLimitStore,
    RedisTokenStore,
    create_redis_client,
)
from .error import ClientError, RateLimitExceeded, ServerError
from .gatekeeper import RequestGatekeeper
from .utils.csrf import CsrfGuard
from .utils.jwt import TokenCodec
from .utils.rate_limit import build_rate_limiters

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    content = {"success": False, "message": exc.base_error.message, "code": exc.base_error.code}
    if exc.data is not None:
        content["data"] = exc.data
    logger.warning(f"Client error: {exc.base_error.code} on {request.method} {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} - {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error", "code": exc.base_error.code},
    )


async def handle_rate_limit_exceeded(request: Request, exc: RateLimitExceeded):
    return exc.response


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    logger.warning(f"Validation error on {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "; ".join(details) or "Invalid request",
            "code": "VALIDATION_ERROR",
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = str(exc) if request.app.state.debug_errors else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": message},
    )


def _build_stores(ApplicationConfig):
    if ApplicationConfig.CACHE_BACKEND == "redis":
        client = create_redis_client(ApplicationConfig.REDIS_URL)
        logger.info("Using Redis for CSRF tokens and rate limits")
        return client, RedisTokenStore(client), RedisRateLimitStore(client)

    logger.info("Using in-memory CSRF token and rate limit stores")
    return None, InMemoryTokenStore(), InMemoryRateLimitStore()


def create_app(ApplicationConfig) -> FastAPI:
    # Fails fast without JWT_SECRET, and without SMTP outside development
    token_codec = TokenCodec(ApplicationConfig.JWT_SECRET)
    email_sender = build_email_sender(ApplicationConfig)

    redis_client, token_store, rate_limit_store = _build_stores(ApplicationConfig)
    csrf_guard = CsrfGuard(token_store, ttl_seconds=int(ApplicationConfig.CSRF_TOKEN_TTL_SECONDS))
    rate_limiters = build_rate_limiters(rate_limit_store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from realty_auth.depends import engine

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        yield
        if redis_client is not None:
            await redis_client.aclose()
        await engine.dispose()

    app = FastAPI(title="Realty Auth API", version="0.1.0", lifespan=lifespan)

    app.state.token_codec = token_codec
    app.state.email_sender = email_sender
    app.state.csrf_guard = csrf_guard
    app.state.rate_limiters = rate_limiters
    app.state.debug_errors = ApplicationConfig.ENVIRONMENT == "development"

    # Registered first so CORS wraps it and preflights never reach it
    app.add_middleware(
        RequestGatekeeper,
        token_codec=token_codec,
        csrf_guard=csrf_guard,
        rate_limiters=rate_limiters,
        api_prefix=ApplicationConfig.API_PREFIX,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from realty_auth.api.routes import auth, health_check, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=ApplicationConfig.API_PREFIX, tags=["Authentication"])
    app.include_router(user.router, prefix=ApplicationConfig.API_PREFIX, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit_exceeded)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app

