"""Test-specific Django settings."""

from django.db.models.signals import class_prepared

import structlog

from .settings import *

# Use SQLite for faster tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Disable debug for tests
DEBUG = False

# Use local cache for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Suppress logs during tests (only show CRITICAL errors)
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "CRITICAL",
    },
    "loggers": {
        "django": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
        "delivery": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
    },
}

# Route structlog through stdlib so the null handlers above apply
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)

# Test-specific settings
TEST_MODE = True

NOTIFICATION_SERVICE_KEY = "test-service-key"
SENDGRID_API_KEY = "test-sendgrid-key"
SENDGRID_FROM_EMAIL = "admin@heritage.test"
SENDGRID_FROM_NAME = "Heritage Admin"
FCM_SERVER_KEY = "test-fcm-server-key"
RELAY_BASE_URL = "https://relay.heritage.test"
RELAY_API_KEY = "test-relay-key"
NOTIFICATION_RUNTIME = "server"
NOTIFICATION_FORCE_RELAY = False
NOTIFICATION_RETRY_BASE_DELAY = 0.0

# Force unmanaged models to be managed ONLY for tests
# The template and delivery log models have managed=False because the hosted
# database owns the schema. But we need the tables created for tests.


def make_unmanaged_models_managed(sender, **_kwargs):
    """Signal handler to make unmanaged models managed during tests.

    This fires when each model class is prepared by Django.
    """
    if not sender._meta.managed:
        sender._meta.managed = True


# Connect the signal - this will fire for each model as it's loaded
class_prepared.connect(make_unmanaged_models_managed)
