# students/views.py
"""
Membership endpoints for signed-in students (admins may act for any student).
"""
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from shared.decorators.permissions import require_login, PermissionChecker
from shared.helpers import parse_json_body, parse_optional_int
from shared.utils import FieldMapper
from core.exceptions import AuthenticationError
from .models import Student
from .services import RenewalService

logger = logging.getLogger(__name__)


def _student_for(request, student_id=None):
    if student_id is None:
        return get_object_or_404(Student, user=request.user)

    if not PermissionChecker.is_admin(request.user):
        logger.warning(f"User {request.user.id} tried to act for student {student_id}")
        raise AuthenticationError("Only administrators can manage other students.", user_friendly=True)
    return get_object_or_404(Student, id=student_id)


@require_GET
@require_login
def membership_view(request):
    student = _student_for(request, parse_optional_int(request.GET.get('student_id')))
    return JsonResponse(RenewalService.membership(student))


@require_POST
@require_login
def renew_membership_view(request):
    """
    Body: {"levels": [...], "timings": [...], "courseDuration": "3", "amountPaid": 500}
    """
    data = FieldMapper.map_form_to_model(parse_json_body(request), 'renewal')
    student = _student_for(request, parse_optional_int(data.get('student_id')))

    student, record, details = RenewalService.renew(
        student,
        data.get('levels'),
        data.get('timings'),
        data.get('course_duration'),
        amount_paid=data.get('amount_paid') or 0,
        language=data.get('language') or 'en',
    )
    return JsonResponse({
        'message': "Membership renewed successfully!",
        'student_id': student.id,
        'billing_id': record.id,
        'expiration_date': student.expiration_date.isoformat(),
        'billing': details.to_dict(),
    }, status=201)
