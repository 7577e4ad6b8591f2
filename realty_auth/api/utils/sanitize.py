"""
Input sanitization for auth request bodies.

Each route declares which fields get which sanitizer. Fields not listed,
including every password and token, pass through byte for byte.
"""

import re
from typing import Any, Callable, Dict

from .auth_routes import AuthRoute

_DANGEROUS_CHARS = re.compile(r"[<>'\"]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_NOT_EMAIL_CHARS = re.compile(r"[^a-zA-Z0-9@._+-]")
_NOT_PHONE_CHARS = re.compile(r"[^0-9\s\-()+]")
# Letters in any script, spaces, hyphens and periods
_NOT_NAME_CHARS = re.compile(r"[^\w\s\-.]|[\d_]")


def _base(value: str) -> str:
    value = value.strip()
    value = _DANGEROUS_CHARS.sub("", value)
    return _CONTROL_CHARS.sub("", value)


def sanitize_text(value: str) -> str:
    return _base(value)


def sanitize_email(value: str) -> str:
    return _NOT_EMAIL_CHARS.sub("", _base(value))


def sanitize_phone(value: str) -> str:
    return _NOT_PHONE_CHARS.sub("", _base(value))


def sanitize_name(value: str) -> str:
    return _NOT_NAME_CHARS.sub("", _base(value))


Sanitizer = Callable[[str], str]

SANITIZATION_SCHEMAS: Dict[AuthRoute, Dict[str, Sanitizer]] = {
    AuthRoute.LOGIN: {"email": sanitize_email},
    AuthRoute.REGISTER: {
        "firstName": sanitize_name,
        "lastName": sanitize_name,
        "email": sanitize_email,
        "phone": sanitize_phone,
    },
    AuthRoute.GOOGLE: {
        "firstName": sanitize_name,
        "lastName": sanitize_name,
        "email": sanitize_email,
    },
    AuthRoute.FORGOT_PASSWORD: {"email": sanitize_email},
    AuthRoute.RESEND_VERIFICATION: {"email": sanitize_email},
    AuthRoute.PROFILE: {
        "firstName": sanitize_name,
        "lastName": sanitize_name,
        "phone": sanitize_phone,
    },
}


def sanitize_body(route: AuthRoute, body: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of body with the route's declared string fields sanitized"""
    schema = SANITIZATION_SCHEMAS.get(route)
    if not schema:
        return body

    sanitized = dict(body)
    for field, sanitizer in schema.items():
        value = sanitized.get(field)
        if isinstance(value, str):
            sanitized[field] = sanitizer(value)
    return sanitized
