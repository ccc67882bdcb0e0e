# users/views.py
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from shared.helpers import parse_json_body
from .services import AdminBootstrapService

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def setup_admin_view(request):
    """
    One-time admin bootstrap. Body may carry {email, password}; otherwise
    ADMIN_EMAIL / ADMIN_PASSWORD are used. Requires X-Setup-Secret when
    SETUP_ADMIN_SECRET is configured.
    """
    data = parse_json_body(request)
    email = data.get('email') or getattr(settings, 'ADMIN_EMAIL', '')
    password = data.get('password') or getattr(settings, 'ADMIN_PASSWORD', '')

    user = AdminBootstrapService.bootstrap(
        email, password, secret=request.headers.get('X-Setup-Secret')
    )

    return JsonResponse({
        'message': 'Admin user created successfully',
        'email': user.email,
    }, status=201)
