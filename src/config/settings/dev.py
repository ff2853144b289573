"""Development settings."""
from .base import *  # noqa: F401,F403

DEBUG = True

LOG_DIR.mkdir(exist_ok=True)  # noqa: F405

# Debug toolbar
try:
    import debug_toolbar  # noqa: F401
    INSTALLED_APPS += ["debug_toolbar"]  # noqa: F405
    MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")  # noqa: F405
    INTERNAL_IPS = ["127.0.0.1"]
except ImportError:
    pass

ENABLE_DJANGO_ADMIN = True

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
LOGGING["loggers"]["performance"]["level"] = "DEBUG"  # noqa: F405
