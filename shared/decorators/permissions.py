# shared/decorators/permissions.py
"""
ROLE CHECKS FOR JSON VIEWS
==========================

Portal roles live in users.UserRole; every role check flows through
PermissionChecker so views and services agree on who is an admin.
"""

import logging
from functools import wraps
from typing import Callable

from django.apps import apps
from django.http import JsonResponse, HttpRequest, HttpResponse

from shared.constants import Roles

logger = logging.getLogger(__name__)


# ============================================================================
# 1. PERMISSION CHECKER - SINGLE SOURCE OF TRUTH
# ============================================================================

class PermissionChecker:
    """Centralized role validation used across the portals."""

    @staticmethod
    def has_role(user, role: str) -> bool:
        """
        Superusers pass every check; everyone else needs a UserRole row.
        """
        if not user or not user.is_authenticated:
            return False

        if user.is_superuser:
            return True

        UserRole = apps.get_model('users', 'UserRole')
        return UserRole.objects.filter(user=user, role=role).exists()

    @staticmethod
    def is_admin(user) -> bool:
        return PermissionChecker.has_role(user, Roles.ADMIN)


# ============================================================================
# 2. HELPER FUNCTIONS
# ============================================================================

def _json_denied(message: str, status: int) -> JsonResponse:
    return JsonResponse({
        'error': message,
        'code': 'AUTH_ERROR',
        'details': {},
    }, status=status)


# ============================================================================
# 3. DECORATORS
# ============================================================================

def require_login(view_func: Callable) -> Callable:
    """JSON 401 instead of a login redirect."""
    @wraps(view_func)
    def _wrapped_view(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        if not request.user.is_authenticated:
            return _json_denied("Please sign in to continue.", 401)
        return view_func(request, *args, **kwargs)

    return _wrapped_view


def require_role(*roles: str) -> Callable:
    """Require any of the given portal roles."""
    def decorator(view_func: Callable) -> Callable:
        @wraps(view_func)
        @require_login
        def _wrapped_view(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            if not any(PermissionChecker.has_role(request.user, role) for role in roles):
                logger.warning(
                    f"Role mismatch: user {request.user.id} on {request.path}, "
                    f"required one of {roles}"
                )
                return _json_denied(
                    f"This action requires the {' or '.join(roles)} role.", 403
                )
            return view_func(request, *args, **kwargs)

        return _wrapped_view

    return decorator


def admin_only(view_func: Callable) -> Callable:
    """Shortcut for the admin portal."""
    return require_role(Roles.ADMIN)(view_func)


__all__ = [
    'PermissionChecker',
    'require_login',
    'require_role',
    'admin_only',
]
