"""Test settings - uses SQLite for fast local testing."""
from .base import *  # noqa: F401,F403

DEBUG = True

# Use SQLite for tests (no PostgreSQL dependency)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# Faster password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable Redis cache in tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Disable Celery in tests
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"

# Disable API throttling in tests for deterministic runs
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}  # noqa: F405

DEFAULT_MONTHLY_REVENUE_GOAL = 75000

# No log files during tests
LOGGING["handlers"].pop("file")  # noqa: F405
LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["vendas"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["vendas"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["performance"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["performance"]["level"] = "WARNING"  # noqa: F405
# Let pytest's caplog see module loggers
LOGGING["loggers"]["vendas"]["propagate"] = True  # noqa: F405
LOGGING["loggers"]["performance"]["propagate"] = True  # noqa: F405
