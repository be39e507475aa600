"""Settings used by the test suite.

Uses an in-memory sqlite database unless DB_ENGINE points elsewhere, a fast
password hasher and the default booking policy regardless of environment.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False

BOOKING_POLICY = {
    'SLOT_MINUTES': 90,
    'OPEN_HOUR': 15,
    'CLOSE_HOUR': 23,
    'MAX_FUTURE_ACTIVE': 3,
    'CANCELLATION_HOURS': 2,
}

TIME_ZONE = 'Europe/Rome'

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

# Threaded tests need a file database: the shared in-memory one reports
# "table is locked" immediately instead of waiting for the writer.
if DATABASES['default']['ENGINE'] == 'django.db.backends.sqlite3':
    DATABASES['default']['TEST'] = {'NAME': BASE_DIR / 'test_db.sqlite3'}
