"""Test settings - uses SQLite for fast local testing."""
import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DEBUG", "True")

from .base import *  # noqa: F401,F403,E402

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

# Disable API throttling in tests for deterministic runs
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {"auth_burst": "1000/min", "auth_sustained": "1000/min"}  # noqa: F405

# Uploaded invoices go to a throwaway directory
MEDIA_ROOT = tempfile.mkdtemp(prefix="crm-test-media-")

JWT_AUTH_COOKIE_SECURE = False
JWT_RETURN_TOKENS_IN_BODY = True

# Disable logging noise during tests
LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["crm"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["crm"]["level"] = "WARNING"  # noqa: F405
LOGGING["handlers"].pop("file")  # noqa: F405
