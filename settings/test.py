# settings/test.py
"""
Test settings: in-memory database, fast hashing, isolated cache.
"""
import tempfile

from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'institute-tests',
    }
}

MEDIA_ROOT = tempfile.mkdtemp(prefix='institute-media-')

SETUP_ADMIN_SECRET = ''
TRANSLATE_NAME_URL = 'https://edge.example.test/functions/v1/translate-name'
TRANSLATE_NAME_API_KEY = 'test-key'

LOGGING['root']['level'] = 'WARNING'
for app_logger in LOGGING['loggers'].values():
    app_logger['level'] = 'WARNING'
