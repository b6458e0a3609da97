"""Development settings."""
from .base import *  # noqa: F401,F403

DEBUG = True

# Run tasks inline unless a worker is explicitly wanted.
CELERY_TASK_ALWAYS_EAGER = env.bool("CELERY_TASK_ALWAYS_EAGER", default=True)  # noqa: F405

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
