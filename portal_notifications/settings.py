"""Django settings for the portal notification engine.

Every deployment-specific value is read from the environment.
"""

import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes")


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-secret-key")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "django_rq",
    "notifications.apps.NotificationsConfig",
]

MIDDLEWARE = [
    "notifications.middleware.RequestIDMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "portal_notifications.urls"
WSGI_APPLICATION = "portal_notifications.wsgi.application"
ASGI_APPLICATION = "portal_notifications.asgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {"context_processors": []},
    }
]

# Database (tables are owned by the portal; models are unmanaged)
DATABASES = {
    "default": {
        "ENGINE": os.getenv("DB_ENGINE", "django.db.backends.postgresql"),
        "NAME": os.getenv("DB_NAME", "portal"),
        "USER": os.getenv("DB_USER", "portal"),
        "PASSWORD": os.getenv("DB_PASSWORD", ""),
        "HOST": os.getenv("DB_HOST", "localhost"),
        "PORT": os.getenv("DB_PORT", "5432"),
        "CONN_MAX_AGE": int(os.getenv("DB_CONN_MAX_AGE", "60")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
USE_I18N = False
USE_TZ = True

# Quiet hours are evaluated in this zone (no per-user time zone)
NOTIFICATION_TIME_ZONE = os.getenv("NOTIFICATION_TIME_ZONE", TIME_ZONE)

# Redis: django-rq queue and cache
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": REDIS_URL,
    }
}

RQ_QUEUES = {
    "default": {
        "URL": REDIS_URL,
        "DEFAULT_TIMEOUT": 300,
    }
}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "notifications.auth.oauth2.OAuth2Authentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "EXCEPTION_HANDLER": "notifications.exceptions.custom_exception_handler",
}

# OAuth2 token validation
OAUTH2_SERVICE_ENABLED = _env_bool("OAUTH2_SERVICE_ENABLED", True)
OAUTH2_INTROSPECTION_ENABLED = _env_bool("OAUTH2_INTROSPECTION_ENABLED", False)
OAUTH2_INTROSPECT_URL = os.getenv(
    "OAUTH2_INTROSPECT_URL", "http://localhost:8080/api/v1/auth/oauth2/introspect"
)
OAUTH2_CLIENT_ID = os.getenv("OAUTH2_CLIENT_ID", "portal-notifications")
OAUTH2_CLIENT_SECRET = os.getenv("OAUTH2_CLIENT_SECRET", "")
OAUTH2_TOKEN_CACHE_PREFIX = "oauth2_token:"
OAUTH2_TOKEN_CACHE_TTL = int(os.getenv("OAUTH2_TOKEN_CACHE_TTL", "60"))
JWT_SECRET = os.getenv("JWT_SECRET", "")

# SMTP email transport
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = _env_bool("EMAIL_USE_TLS", True)
EMAIL_TIMEOUT = float(os.getenv("EMAIL_TIMEOUT", "10"))
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "notifications@example.com")

# Realtime pub/sub publish endpoint; empty disables realtime push
REALTIME_PUBLISH_URL = os.getenv("REALTIME_PUBLISH_URL", "")
REALTIME_PUBLISH_TOKEN = os.getenv("REALTIME_PUBLISH_TOKEN", "")
REALTIME_PUBLISH_TIMEOUT = float(os.getenv("REALTIME_PUBLISH_TIMEOUT", "3"))

# User directory (contact details for email)
USER_DIRECTORY_BASE_URL = os.getenv(
    "USER_DIRECTORY_BASE_URL", "http://localhost:8000/api/v1/user-directory"
)
USER_DIRECTORY_TOKEN = os.getenv("USER_DIRECTORY_TOKEN", "")
USER_DIRECTORY_TIMEOUT = float(os.getenv("USER_DIRECTORY_TIMEOUT", "5"))

# Front end base URL used to build absolute links in email
FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")

# structlog owns handler configuration (notifications.logging.setup_logging)
LOGGING_CONFIG = None
