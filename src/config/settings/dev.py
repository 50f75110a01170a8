"""Development settings."""
from .base import *  # noqa: F401,F403

DEBUG = True

# CORS
CORS_ALLOW_ALL_ORIGINS = True

# Invoice OCR can be exercised locally without a worker
CELERY_TASK_ALWAYS_EAGER = env.bool("CELERY_TASK_ALWAYS_EAGER", default=False)  # noqa: F405

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
