# settings/development.py
"""
Development settings for the language institute backend.
"""
from .base import *

# Debug settings
DEBUG = True
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# Logging configuration for development
# Ensure logs directory exists
(BASE_DIR / 'logs').mkdir(exist_ok=True)

LOGGING['handlers']['file'] = {
    'level': 'DEBUG',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'logs' / 'development.log',
    'formatter': 'verbose',
}

LOGGING['handlers']['billing_file'] = {
    'level': 'DEBUG',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'logs' / 'billing_development.log',
    'formatter': 'verbose',
}

LOGGING['loggers']['django']['handlers'] = ['console', 'file']

for app_logger in ('core', 'shared', 'users', 'students', 'admissions'):
    LOGGING['loggers'][app_logger]['handlers'] = ['console', 'file']
    LOGGING['loggers'][app_logger]['level'] = 'DEBUG'

LOGGING['loggers']['billing'] = {
    'handlers': ['console', 'billing_file'],
    'level': 'DEBUG',
    'propagate': False,
}

# Disable security settings for development
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_SSL_REDIRECT = False

# CORS settings for development
CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
CORS_ALLOW_ALL_ORIGINS = True
