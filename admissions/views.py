# admissions/views.py
"""
Registration wizard endpoints (JSON). The draft lives in the session;
submission runs the saga in admissions.services.
"""
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from shared.constants import RegistrationFlows
from shared.decorators.permissions import PermissionChecker
from shared.helpers import parse_json_body
from shared.utils import IdempotencyService
from core.exceptions import AuthenticationError, RegistrationValidationError
from .services import RegistrationSubmissionService, compute_billing
from .session import RegistrationSession
from .wizard import Step

logger = logging.getLogger(__name__)

ADMIN_FLOWS = (RegistrationFlows.ADMIN_ENTRY, RegistrationFlows.PREVIOUS_STUDENT)


def _check_flow_access(request, flow):
    if flow in ADMIN_FLOWS and not PermissionChecker.is_admin(request.user):
        logger.warning(f"Non-admin attempted {flow} registration from {request.META.get('REMOTE_ADDR')}")
        raise AuthenticationError("Only administrators can register students this way.", user_friendly=True)


def _parse_step(value) -> Step:
    try:
        return Step(value)
    except ValueError:
        raise RegistrationValidationError(f"Unknown registration step '{value}'.")


# ============ WIZARD ============

@require_POST
def start_view(request):
    data = parse_json_body(request)
    flow = data.get('flow') or RegistrationFlows.NEW_STUDENT
    _check_flow_access(request, flow)

    session = RegistrationSession(request.session)
    session.start(flow)
    return JsonResponse(session.state(), status=201)


@require_POST
def step_view(request, step):
    session = RegistrationSession(request.session)
    _check_flow_access(request, session.flow)

    session.mutate(_parse_step(step), parse_json_body(request))
    return JsonResponse(session.state())


@require_POST
def back_view(request):
    session = RegistrationSession(request.session)
    session.back()
    return JsonResponse(session.state())


@require_GET
def draft_view(request):
    session = RegistrationSession(request.session)
    return JsonResponse(session.state())


@require_POST
def discard_view(request):
    RegistrationSession(request.session).discard()
    return JsonResponse({'message': 'Registration discarded'})


@require_GET
def billing_preview_view(request):
    """Fee breakdown for the current draft (before signing)."""
    session = RegistrationSession(request.session)
    billing = compute_billing(session.draft, session.flow)
    return JsonResponse({'flow': session.flow, 'billing': billing.to_dict()})


# ============ SUBMISSION ============

@require_POST
def submit_view(request):
    """
    Body: {"signature": "data:image/png;base64,...", "language": "en"}
    Header: X-Idempotency-Key (falls back to the key issued at start).
    """
    header_key = IdempotencyService.get_idempotency_key(request, RegistrationSubmissionService.IDEMPOTENCY_SCOPE)
    if header_key:
        replay = RegistrationSubmissionService.completed_result(header_key)
        if replay is not None:
            return JsonResponse(replay, status=200)

    session = RegistrationSession(request.session)
    flow = session.flow
    _check_flow_access(request, flow)

    data = parse_json_body(request)
    idempotency_key = header_key or session.submission_key

    draft = session.finalize()
    result = RegistrationSubmissionService.submit(
        draft,
        flow,
        data.get('signature'),
        idempotency_key,
        language=data.get('language') or 'en',
    )

    session.discard()
    return JsonResponse(result, status=201)
