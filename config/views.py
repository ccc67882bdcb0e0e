# config/views.py
"""
Project-level endpoints: health, name translation, artifact downloads and
JSON error handlers.
"""
import logging
import mimetypes

from django.http import JsonResponse, HttpResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from shared.constants import AUTO_TRANSLATION_SETTING
from shared.exceptions.gateway import TranslationServiceError, InvalidArtifactTokenError
from shared.helpers import parse_json_body
from shared.services import NameTranslationService
from shared.storage import ArtifactStorage
from core.middleware import error_payload
from core.services import ConfigurationService

logger = logging.getLogger(__name__)


# ============================================================================
# HEALTH
# ============================================================================

@require_GET
def health_check_view(request):
    """System health check endpoint."""
    from django.db import connection
    from django.db.utils import OperationalError

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = True
    except OperationalError:
        db_status = False

    status_code = 200 if db_status else 503

    return JsonResponse({
        'status': 'healthy' if db_status else 'unhealthy',
        'database': 'connected' if db_status else 'disconnected',
        'timestamp': timezone.now().isoformat(),
    }, status=status_code)


# ============================================================================
# NAME TRANSLATION
# ============================================================================

@require_POST
def translate_name_view(request):
    """
    {"arabicName": "..."} -> {"translatedName": "...", "translated": bool}.
    Returns the input unchanged when auto translation is switched off.
    """
    data = parse_json_body(request)
    arabic_name = (data.get('arabicName') or '').strip()

    if not arabic_name or not ConfigurationService.setting_enabled(AUTO_TRANSLATION_SETTING):
        return JsonResponse({'translatedName': arabic_name, 'translated': False})

    try:
        translated = NameTranslationService().translate_name(arabic_name)
    except TranslationServiceError as e:
        message = e.message if e.user_friendly else "Translation failed."
        return JsonResponse(error_payload(message, 'TRANSLATION_ERROR'), status=502)

    return JsonResponse({'translatedName': translated, 'translated': True})


# ============================================================================
# ARTIFACTS
# ============================================================================

@require_GET
def artifact_download_view(request, token):
    """Serve a private signature/PDF for a valid, unexpired signed token."""
    storage = ArtifactStorage()
    try:
        path = storage.resolve_token(token)
    except InvalidArtifactTokenError as e:
        logger.info(f"Rejected artifact token: {e}")
        return JsonResponse(error_payload(str(e), 'INVALID_LINK'), status=403)

    if not storage.exists(path):
        return JsonResponse(error_payload("File not found.", 'NOT_FOUND'), status=404)

    content_type = mimetypes.guess_type(path)[0] or 'application/octet-stream'
    response = HttpResponse(storage.read(path), content_type=content_type)
    response['Content-Disposition'] = f'inline; filename="{path.rsplit("/", 1)[-1]}"'
    return response


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def handler404(request, exception):
    return JsonResponse(error_payload("Not found.", 'NOT_FOUND'), status=404)


def handler500(request):
    return JsonResponse(error_payload("System error. Our team has been notified.", 'SERVER_ERROR'), status=500)


def handler403(request, exception):
    return JsonResponse(error_payload("You do not have permission to access this resource.", 'AUTH_ERROR'), status=403)


def handler400(request, exception):
    return JsonResponse(error_payload("Your request could not be processed.", 'BAD_REQUEST'), status=400)
