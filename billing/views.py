# billing/views.py
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from shared.decorators.permissions import require_login, admin_only, PermissionChecker
from shared.helpers import parse_json_body
from core.exceptions import AuthenticationError
from .models import BillingRecord
from .services import BillingService

logger = logging.getLogger(__name__)


@require_GET
@require_login
def billing_detail_view(request, billing_id):
    """Billing record with signed document links; admins or the owning student."""
    record = get_object_or_404(BillingRecord.objects.select_related('student'), id=billing_id)

    if not PermissionChecker.is_admin(request.user) and record.student.user_id != request.user.id:
        logger.warning(f"User {request.user.id} denied billing {billing_id}")
        raise AuthenticationError("You do not have access to this billing record.", user_friendly=True)

    return JsonResponse(BillingService.summary(record))


@require_POST
@admin_only
def record_payment_view(request, billing_id):
    """
    Record a partial payment.
    Body: {"amount": "250.00", "payment_method": "Cash"}
    """
    data = parse_json_body(request)
    record, payment = BillingService.record_payment(
        billing_id,
        data.get('amount'),
        data.get('payment_method') or data.get('paymentMethod') or '',
        recorded_by=request.user,
    )

    message = (
        "Payment completed! Full amount paid."
        if record.is_fully_paid else "Payment recorded successfully!"
    )
    return JsonResponse({
        'message': message,
        'payment_id': payment.id,
        'billing': BillingService.summary(record),
    }, status=201)
