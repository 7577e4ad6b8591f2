"""
Request Gatekeeper Middleware.

Runs in front of every /auth/* route:
1. Rate limiting (policy picked by path)
2. CSRF validation for state-changing requests that are not exempt
3. Bearer token verification for protected routes
4. Sanitization of known body fields for POST/PUT/PATCH

Any failed check short-circuits with a {success: false, message} response.
Written as a plain ASGI middleware so the sanitized body can replace the
original one before the route reads it.
"""

import json
import logging
from typing import Dict, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from realty_auth.api.utils.auth_routes import (
    AUTH_PATH_PREFIX,
    AuthRoute,
    is_csrf_exempt,
    requires_auth,
    resolve_route,
)
from realty_auth.api.utils.csrf import CSRF_HEADER, CsrfGuard
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.api.utils.rate_limit import RateLimiter
from realty_auth.api.utils.sanitize import SANITIZATION_SCHEMAS, sanitize_body

logger = logging.getLogger(__name__)

SANITIZED_METHODS = {"POST", "PUT", "PATCH"}


def _reject(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


class RequestGatekeeper:
    def __init__(
        self,
        app: ASGIApp,
        token_codec: TokenCodec,
        csrf_guard: CsrfGuard,
        rate_limiters: Dict[str, RateLimiter],
        api_prefix: str = "",
    ):
        self.app = app
        self.token_codec = token_codec
        self.csrf_guard = csrf_guard
        self.rate_limiters = rate_limiters
        self.api_prefix = api_prefix.rstrip("/")

    def _relative_path(self, path: str) -> Optional[str]:
        if self.api_prefix:
            if not path.startswith(self.api_prefix + "/"):
                return None
            path = path[len(self.api_prefix):]
        return path if path.startswith(AUTH_PATH_PREFIX) else None

    def _select_rate_limiter(self, path: str) -> RateLimiter:
        if path.startswith(AuthRoute.LOGIN.value):
            return self.rate_limiters["login"]
        if path.startswith(AuthRoute.REGISTER.value):
            return self.rate_limiters["register"]
        if path.startswith(AuthRoute.FORGOT_PASSWORD.value) or path.startswith(
            AuthRoute.RESET_PASSWORD.value
        ):
            return self.rate_limiters["password_reset"]
        return self.rate_limiters["general"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = self._relative_path(scope["path"])
        if path is None:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        method = request.method
        logger.debug(f"🔐 Gatekeeper: processing {method} {path}")

        response = await self._check(request, method, path)
        if response is not None:
            await response(scope, receive, send)
            return

        if method in SANITIZED_METHODS:
            receive = await self._sanitized_receive(request, scope, receive, path)

        await self.app(scope, receive, send)

    async def _check(self, request: Request, method: str, path: str) -> Optional[JSONResponse]:
        # 1. Rate limiting
        limited = await self._select_rate_limiter(path).check(request)
        if limited is not None:
            return limited

        # 2. CSRF
        if not is_csrf_exempt(method, path):
            csrf_token = request.headers.get(CSRF_HEADER)
            if not csrf_token:
                logger.warning(f"🔐 Gatekeeper: missing CSRF token for {method} {path}")
                return _reject(403, "CSRF token is required")
            if not await self.csrf_guard.validate(csrf_token):
                logger.warning(f"🔐 Gatekeeper: invalid CSRF token for {method} {path}")
                return _reject(403, "Invalid or expired CSRF token")

        # 3. Bearer authentication
        if requires_auth(path):
            scheme, _, token = (request.headers.get("authorization") or "").partition(" ")
            token = token.strip()
            if scheme.lower() != "bearer" or not token:
                logger.warning(f"🔐 Gatekeeper: no access token for {path}")
                return _reject(401, "Access token is required")

            claims = self.token_codec.verify(token)
            if claims is None:
                logger.warning(f"🔐 Gatekeeper: invalid access token for {path}")
                return _reject(401, "Invalid or expired access token")
            request.state.token_claims = claims

        return None

    async def _sanitized_receive(
        self, request: Request, scope: Scope, receive: Receive, path: str
    ) -> Receive:
        route = resolve_route(path)
        if route not in SANITIZATION_SCHEMAS:
            return receive

        body = await request.body()
        try:
            payload = json.loads(body) if body else None
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            body = json.dumps(sanitize_body(route, payload)).encode("utf-8")
            scope["headers"] = [
                (name, value) for name, value in scope["headers"] if name != b"content-length"
            ] + [(b"content-length", str(len(body)).encode("latin-1"))]
        else:
            # Unparseable bodies go through untouched; the route reports the error
            logger.debug(f"🔐 Gatekeeper: body for {path} is not a JSON object, skipping sanitization")

        body_sent = False

        async def replay() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        return replay
