import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key: str, default=None):
    """Environment variables take precedence over env.yaml values."""
    if key in os.environ:
        return os.environ[key]
    return data.get(key, default)


def _get_list(key: str, default=None):
    value = _get(key, default or [])
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def _get_bool(key: str, default: bool) -> bool:
    value = _get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


class ApplicationConfig:
    ENVIRONMENT = _get("ENVIRONMENT", "development")
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./realty_auth.db")
    REDIS_URL = _get("REDIS_URL", "redis://localhost:6379/0")
    CACHE_BACKEND = _get("CACHE_BACKEND", "memory")
    API_PREFIX = _get("API_PREFIX", "/api")
    API_PORT = int(_get("API_PORT", 8000))
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _get_list("CORS_ORIGINS")
    CORS_ALLOW_CREDENTIALS = _get_bool("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")

    # Startup fails when unset
    JWT_SECRET = _get("JWT_SECRET")

    FRONTEND_URL = _get("FRONTEND_URL", "http://localhost:3000")
    SMTP_HOST = _get("SMTP_HOST")
    SMTP_PORT = int(_get("SMTP_PORT", 587))
    SMTP_USER = _get("SMTP_USER")
    SMTP_PASS = _get("SMTP_PASS")
    SMTP_FROM = _get("SMTP_FROM", "no-reply@realtyreels.com")

    CSRF_TOKEN_TTL_SECONDS = int(_get("CSRF_TOKEN_TTL_SECONDS", 24 * 60 * 60))
