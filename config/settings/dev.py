"""Development settings for the LudoCloud backend.

This module extends the base settings with development specific
configuration, such as enabling debug and running Celery tasks inline.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# No broker needed locally: audit tasks run inline
CELERY_TASK_ALWAYS_EAGER = True
