"""Django settings for the notification engine.

All provider credentials, relay endpoints and delivery tuning knobs are read
from environment variables. Nothing secret is embedded in code.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-local-only")

DEBUG = _env_bool("DEBUG", default=False)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "django_rq",
    "delivery",
]

MIDDLEWARE = [
    "delivery.middleware.RequestIDMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "notification_engine.urls"

WSGI_APPLICATION = "notification_engine.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB", "postgres"),
        "USER": os.getenv("POSTGRES_USER", "postgres"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD", ""),
        "HOST": os.getenv("POSTGRES_HOST", "localhost"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
        "OPTIONS": {"connect_timeout": 5},
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "UTC"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "delivery.auth.ServiceKeyAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "EXCEPTION_HANDLER": "delivery.exceptions.custom_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

RQ_QUEUES = {
    "default": {
        "HOST": os.getenv("REDIS_HOST", "localhost"),
        "PORT": int(os.getenv("REDIS_PORT", "6379")),
        "DB": int(os.getenv("REDIS_DB", "0")),
        "PASSWORD": os.getenv("REDIS_PASSWORD") or None,
        "DEFAULT_TIMEOUT": 360,
    }
}

# Caller authentication for the HTTP API
NOTIFICATION_SERVICE_KEY = os.getenv("NOTIFICATION_SERVICE_KEY", "")

# Email provider (SendGrid v3)
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY", "")
SENDGRID_API_URL = os.getenv(
    "SENDGRID_API_URL", "https://api.sendgrid.com/v3/mail/send"
)
SENDGRID_FROM_EMAIL = os.getenv("SENDGRID_FROM_EMAIL", "no-reply@heritage.local")
SENDGRID_FROM_NAME = os.getenv("SENDGRID_FROM_NAME", "Heritage Admin")

# Push provider (FCM legacy HTTP endpoint)
FCM_SERVER_KEY = os.getenv("FCM_SERVER_KEY", "")
FCM_API_URL = os.getenv("FCM_API_URL", "https://fcm.googleapis.com/fcm/send")

# Relay (edge functions reachable from constrained environments)
RELAY_BASE_URL = os.getenv("RELAY_BASE_URL", "")
RELAY_API_KEY = os.getenv("RELAY_API_KEY", "")
RELAY_EMAIL_FUNCTION = os.getenv("RELAY_EMAIL_FUNCTION", "heritage-send-email")
RELAY_PUSH_FUNCTION = os.getenv("RELAY_PUSH_FUNCTION", "heritage-send-fcm")

# Delivery behaviour
NOTIFICATION_RUNTIME = os.getenv("NOTIFICATION_RUNTIME", "")
NOTIFICATION_FORCE_RELAY = _env_bool("NOTIFICATION_FORCE_RELAY", default=False)
NOTIFICATION_HTTP_TIMEOUT = float(os.getenv("NOTIFICATION_HTTP_TIMEOUT", "10"))
NOTIFICATION_MAX_ATTEMPTS = int(os.getenv("NOTIFICATION_MAX_ATTEMPTS", "3"))
NOTIFICATION_RETRY_BASE_DELAY = float(
    os.getenv("NOTIFICATION_RETRY_BASE_DELAY", "1.0")
)
NOTIFICATION_FANOUT_MAX_WORKERS = int(
    os.getenv("NOTIFICATION_FANOUT_MAX_WORKERS", "8")
)
