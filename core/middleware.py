# core/middleware.py
"""
Request-level concerns: security headers, JSON error payloads and debug logging.
"""
import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse, Http404

from .exceptions import InstituteManagementException

logger = logging.getLogger(__name__)


def error_payload(message, code=None, details=None):
    """The toast payload every JSON error response carries."""
    return {'error': message, 'code': code, 'details': details or {}}


# ============ SECURITY HEADERS MIDDLEWARE ============

class SecurityHeadersMiddleware:
    """Adds baseline security headers."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if response is None:
            return response

        response["X-Content-Type-Options"] = "nosniff"
        response["X-Frame-Options"] = "DENY"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Signed artifact downloads must never be cached by intermediaries
        if request.path.startswith("/artifacts/"):
            response["Cache-Control"] = "private, no-store"

        return response


# ============ EXCEPTION HANDLING MIDDLEWARE ============

class ExceptionHandlingMiddleware:
    """Turns InstituteManagementException and server errors into JSON."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        # Django renders these through the handler404/handler403 views
        if isinstance(exception, (Http404, PermissionDenied)):
            return None

        # Business logic error
        if isinstance(exception, InstituteManagementException):
            logger.warning(f"Business exception on {request.path}: {exception}")

            message = exception.message if exception.user_friendly else "Operation failed."
            return JsonResponse(
                error_payload(message, exception.error_code, exception.details),
                status=exception.status_code
            )

        # System error
        logger.error(f"System exception on {request.path}: {exception}", exc_info=True)
        return JsonResponse(
            error_payload("System error. Our team has been notified.", "SERVER_ERROR"),
            status=500
        )


# ============ REQUEST LOGGING MIDDLEWARE ============

class RequestLoggingMiddleware:
    """Debug-level structured request/response logging."""

    SKIP_PATHS = ('/static/', '/media/', '/favicon.ico', '/health/', '/__debug__/')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Skip logging for static files and health checks
        if self._should_skip_logging(request):
            return self.get_response(request)

        # Only log in debug mode
        if settings.DEBUG:
            logger.debug("Request", extra={
                "method": request.method,
                "path": request.path,
                "ip": self._get_client_ip(request),
                "user": self._user_id(request),
            })

        response = self.get_response(request)

        if settings.DEBUG:
            logger.debug("Response", extra={
                "path": request.path,
                "status": getattr(response, 'status_code', None),
                "user": self._user_id(request),
            })

        return response

    def _should_skip_logging(self, request) -> bool:
        return request.path.startswith(self.SKIP_PATHS)

    def _user_id(self, request):
        user = getattr(request, 'user', None)
        return getattr(user, 'id', None) if user is not None else None

    def _get_client_ip(self, request) -> str:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        return xff.split(",")[0] if xff else request.META.get("REMOTE_ADDR", "unknown")
