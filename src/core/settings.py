"""Django settings for the inkfeed blogging backend.

Environment-driven configuration for the database, Redis, S3 storage, GitHub
OAuth and security defaults.
"""
import os
from pathlib import Path
from urllib.parse import urlparse

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def _get_env(name: str, default: str | None = None) -> str | None:
    """Read an environment variable with an optional fallback."""
    return os.environ.get(name, default)


def _parse_database_url(url: str) -> dict:
    """Parse a PostgreSQL or SQLite DATABASE_URL into a Django DATABASES entry."""
    parsed = urlparse(url)
    if parsed.scheme == "sqlite":
        return {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": parsed.path.lstrip("/") or ":memory:",
        }
    return {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": parsed.path.lstrip("/"),
        "USER": parsed.username,
        "PASSWORD": parsed.password,
        "HOST": parsed.hostname,
        "PORT": parsed.port or "5432",
    }


SECRET_KEY = _get_env("SECRET_KEY", "dev-secret-key-change-me")
DEBUG = _get_env("DEBUG", "True") == "True"
if not DEBUG and SECRET_KEY in ("change-me", "dev-secret-key-change-me"):
    raise ImproperlyConfigured("SECRET_KEY must be set in production")
ALLOWED_HOSTS = [
    h.strip()
    for h in _get_env("ALLOWED_HOSTS", "localhost,127.0.0.1,0.0.0.0").split(",")
    if h.strip()
]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "corsheaders",
    "rest_framework",
    "drf_spectacular",
    "core",
    "users",
    "feeds",
    "comments",
    "storage",
    "scripts",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Token auth runs last so request.user reflects the bearer/cookie token.
    "core.middleware.JWTAuthMiddleware",
]

ROOT_URLCONF = "core.urls"
APPEND_SLASH = False

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "core.wsgi.application"

DATABASE_URL = _get_env("DATABASE_URL")
if DATABASE_URL:
    DATABASES = {"default": _parse_database_url(DATABASE_URL)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": _get_env("POSTGRES_DB", "inkfeed"),
            "USER": _get_env("POSTGRES_USER", "inkfeed"),
            "PASSWORD": _get_env("POSTGRES_PASSWORD", "inkfeed"),
            "HOST": _get_env("POSTGRES_HOST", "localhost"),
            "PORT": _get_env("POSTGRES_PORT", "5432"),
        }
    }

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_USER_MODEL = "users.User"

DEBUG_AUTH_ERRORS = _get_env("DEBUG_AUTH_ERRORS", "False") == "True"
REDIS_URL = _get_env("REDIS_URL", "redis://localhost:6379/0")

# Origins allowed to call the API from a browser; "*" allows any origin but
# then no credentials (cookies) are accepted cross-origin.
_cors_origins = [
    o.strip() for o in _get_env("CORS_ALLOWED_ORIGINS", "*").split(",") if o.strip()
]
CORS_ALLOW_ALL_ORIGINS = "*" in _cors_origins
CORS_ALLOWED_ORIGINS = [] if CORS_ALLOW_ALL_ORIGINS else _cors_origins
CORS_ALLOW_CREDENTIALS = not CORS_ALLOW_ALL_ORIGINS
CORS_PREFLIGHT_MAX_AGE = 600

# Site metadata used by RSS and canonical links.
SITE_NAME = _get_env("SITE_NAME", "inkfeed")
SITE_URL = _get_env("SITE_URL", "http://localhost:5173").rstrip("/")
SITE_DESCRIPTION = _get_env("SITE_DESCRIPTION", "A personal blog")
RSS_ITEM_LIMIT = int(_get_env("RSS_ITEM_LIMIT", "20"))

SUMMARY_LENGTH = int(_get_env("SUMMARY_LENGTH", "150"))
# "truncate" keeps the first SUMMARY_LENGTH characters, "first_sentence" the
# first sentence. Either runs only when a feed is saved with a blank summary.
SUMMARY_STRATEGY = _get_env("SUMMARY_STRATEGY", "truncate")

# GitHub OAuth
GITHUB_CLIENT_ID = _get_env("GITHUB_CLIENT_ID", "")
GITHUB_CLIENT_SECRET = _get_env("GITHUB_CLIENT_SECRET", "")
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"
# When False, only the first registrant may ever sign in.
OPEN_REGISTRATION = _get_env("OPEN_REGISTRATION", "False") == "True"

# S3-compatible object storage
S3_ENDPOINT = _get_env("S3_ENDPOINT", "")
S3_BUCKET = _get_env("S3_BUCKET", "")
S3_FOLDER = _get_env("S3_FOLDER", "")
S3_REGION = _get_env("S3_REGION", "auto")
S3_ACCESS_HOST = _get_env("S3_ACCESS_HOST", "") or S3_ENDPOINT
S3_ACCESS_KEY_ID = _get_env("S3_ACCESS_KEY_ID", "")
S3_SECRET_ACCESS_KEY = _get_env("S3_SECRET_ACCESS_KEY", "")
S3_FORCE_PATH_STYLE = _get_env("S3_FORCE_PATH_STYLE", "False").lower() == "true"
S3_PRESIGN_EXPIRES = int(_get_env("S3_PRESIGN_EXPIRES", "3600"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": _get_env("LOG_LEVEL", "INFO")},
}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": ["core.authentication.MiddlewareUserAuthentication"],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": "django.contrib.auth.models.AnonymousUser",
    "EXCEPTION_HANDLER": "core.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "inkfeed API",
    "DESCRIPTION": (
        "Feeds, tags, comments, GitHub sign-in and content-addressed storage "
        "for a personal blog."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "SERVE_PUBLIC": True,
    "APPEND_COMPONENTS": {
        "securitySchemes": {
            "bearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
            }
        }
    },
    "SECURITY": [{"bearerAuth": []}],
}
