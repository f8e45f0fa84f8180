"""
EA Foods — Test Settings

In-memory SQLite, local-memory cache, eager Celery. Activated by pytest
through pyproject.toml.

@file config/settings/test.py
"""

from .base import *  # noqa: F401, F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

TIME_ZONE = 'Africa/Nairobi'
ORDER_CUTOFF_TIME = '18:00'
STOCK_UPDATE_TIMES = {'morning': '08:00', 'evening': '18:00'}
LOW_STOCK_THRESHOLD = 10
ORDER_NUMBER_MAX_ATTEMPTS = 5

LOGGING['loggers']['eafoods']['level'] = 'WARNING'  # noqa: F405
