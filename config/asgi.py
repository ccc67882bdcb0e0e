"""
ASGI config for the institute project.

It exposes the ASGI callable as a module-level variable named ``application``.
"""

import os

from django.core.asgi import get_asgi_application

# Use DJANGO_SETTINGS_MODULE environment variable when provided, otherwise default to settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'settings')

application = get_asgi_application()
