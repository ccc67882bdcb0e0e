# shared/helpers.py
"""
Small request helpers shared by the JSON views.
"""
import json
import logging

logger = logging.getLogger(__name__)


def parse_json_body(request) -> dict:
    """Decode a JSON object body; raises the registration validation error on garbage."""
    from core.exceptions import RegistrationValidationError

    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid JSON body on {request.path}: {e}")
        raise RegistrationValidationError("Request body must be valid JSON.")

    if not isinstance(data, dict):
        raise RegistrationValidationError("Request body must be a JSON object.")
    return data


def split_param(value) -> list:
    """'a,b, c' -> ['a', 'b', 'c']; blanks dropped."""
    return [part.strip() for part in (value or '').split(',') if part.strip()]


def parse_optional_int(value):
    if value in (None, '', 'null'):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        from core.exceptions import RegistrationValidationError
        raise RegistrationValidationError(f"'{value}' is not a valid identifier.")


def institute_today():
    """Calendar date in the institute's timezone (registration and expiry dates use it)."""
    from zoneinfo import ZoneInfo
    from django.conf import settings
    from django.utils import timezone

    return timezone.localdate(timezone=ZoneInfo(settings.INSTITUTE_TIMEZONE))
