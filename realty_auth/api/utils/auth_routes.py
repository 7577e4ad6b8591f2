"""
Auth route table shared by the gatekeeper, the CSRF exemptions and the
request sanitizers. Paths are relative to the API prefix.
"""

from enum import Enum
from typing import Optional


class AuthRoute(str, Enum):
    REGISTER = "/auth/register"
    LOGIN = "/auth/login"
    GOOGLE = "/auth/google"
    LOGOUT = "/auth/logout"
    ME = "/auth/me"
    PROFILE = "/auth/profile"
    FORGOT_PASSWORD = "/auth/forgot-password"
    RESET_PASSWORD = "/auth/reset-password"
    VERIFY_EMAIL = "/auth/verify-email"
    RESEND_VERIFICATION = "/auth/resend-verification"
    CHECK_EMAIL = "/auth/check-email"
    VALIDATE_TOKEN = "/auth/validate-token"
    CLEAR_EXPIRED_TOKENS = "/auth/clear-expired-tokens"
    CSRF_TOKEN = "/auth/csrf-token"
    CREATE_VIDEO = "/auth/create-video"


AUTH_PATH_PREFIX = "/auth/"

# No credentials yet, so no CSRF token either
PUBLIC_ROUTES = frozenset(
    {
        AuthRoute.LOGIN,
        AuthRoute.REGISTER,
        AuthRoute.FORGOT_PASSWORD,
        AuthRoute.GOOGLE,
        AuthRoute.VERIFY_EMAIL,
        AuthRoute.RESET_PASSWORD,
        AuthRoute.VALIDATE_TOKEN,
        AuthRoute.CHECK_EMAIL,
        AuthRoute.CSRF_TOKEN,
    }
)

# Bearer-authenticated routes that skip the CSRF check
BEARER_CSRF_EXEMPT_ROUTES = frozenset({AuthRoute.PROFILE, AuthRoute.ME, AuthRoute.LOGOUT})

# Matched by prefix so nested video routes are covered
PROTECTED_ROUTES = (
    AuthRoute.ME,
    AuthRoute.PROFILE,
    AuthRoute.LOGOUT,
    AuthRoute.CLEAR_EXPIRED_TOKENS,
    AuthRoute.CREATE_VIDEO,
)


def resolve_route(path: str) -> Optional[AuthRoute]:
    """Exact lookup, ignoring a trailing slash"""
    try:
        return AuthRoute(path.rstrip("/") or "/")
    except ValueError:
        return None


def _matches_prefix(path: str, route: AuthRoute) -> bool:
    return path == route.value or path.startswith(route.value + "/")


def requires_auth(path: str) -> bool:
    path = path.rstrip("/")
    return any(_matches_prefix(path, route) for route in PROTECTED_ROUTES)


def is_csrf_exempt(method: str, path: str) -> bool:
    if method.upper() == "GET":
        return True
    route = resolve_route(path)
    return route in PUBLIC_ROUTES or route in BEARER_CSRF_EXEMPT_ROUTES
