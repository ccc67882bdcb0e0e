# billing/services.py
"""
BILLING SERVICES - fee calculation, offers, billing records and payments.

The calculator is pure (no database access); the services around it
persist records and emit the signed document.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Dict, Any, List

from django.apps import apps
from django.conf import settings
from django.db import transaction

# SHARED IMPORTS
from shared.constants import StatusChoices, RegistrationFlows
from shared.helpers import institute_today
from core.config_values import parse_months
from core.exceptions import RegistrationValidationError, PaymentProcessingError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')
ZERO = Decimal('0.00')


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'billing'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


def to_money(value) -> Decimal:
    """Coerce to Decimal rounded half-up to cents."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise RegistrationValidationError(f"'{value}' is not a valid amount.")
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(value) -> str:
    """Single money formatter for JSON summaries and PDFs: 1215 -> '1,215.00'."""
    return f"{to_money(value):,.2f}"


# ============ FEE CALCULATOR ============

@dataclass
class BillingDetails:
    """Computed fee breakdown and schedule for one registration."""
    months: int
    registration_date: date
    course_start_date: date
    payment_deadline: date
    expiration_date: date
    total_fee: Decimal
    discount_percentage: Decimal
    fee_after_discount: Decimal
    amount_paid: Decimal
    amount_remaining: Decimal
    first_payment: Decimal
    second_payment: Decimal
    duration_key: str = ''
    course_package: str = ''
    time_slot: str = ''
    courses: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        money = ('total_fee', 'fee_after_discount', 'amount_paid', 'amount_remaining',
                 'first_payment', 'second_payment')
        data = {
            'months': self.months,
            'duration_key': self.duration_key,
            'course_package': self.course_package,
            'time_slot': self.time_slot,
            'courses': list(self.courses),
            'registration_date': self.registration_date.isoformat(),
            'course_start_date': self.course_start_date.isoformat(),
            'payment_deadline': self.payment_deadline.isoformat(),
            'expiration_date': self.expiration_date.isoformat(),
            'discount_percentage': str(self.discount_percentage),
        }
        for name in money:
            data[name] = str(getattr(self, name))
        data['formatted'] = {name: format_amount(getattr(self, name)) for name in money}
        return data


class FeeCalculator:
    """
    Fee, discount and payment-schedule rules.

    New signups always get the fixed new-student discount; admin entries
    (new or previous students) get the active offer, if any.
    """

    @staticmethod
    def flat_rate() -> Decimal:
        return to_money(getattr(settings, 'FLAT_MONTHLY_RATE', 500))

    @staticmethod
    def resolve_months(duration_key=None, custom_duration=None) -> int:
        raw = custom_duration if custom_duration not in (None, '') else parse_months(duration_key)
        try:
            months = int(raw)
        except (TypeError, ValueError):
            raise RegistrationValidationError(
                "Please choose a course duration.",
                details={'duration': [f"'{duration_key}' is not a valid duration."]}
            )
        if months <= 0:
            raise RegistrationValidationError(
                "Course duration must be at least one month.",
                details={'duration': ["Duration must be positive."]}
            )
        return months

    @staticmethod
    def total_fee(months: int, duration_key=None, price_table=None, custom_duration=None) -> Decimal:
        """Configured price for the duration; custom or unpriced durations use the flat monthly rate."""
        if custom_duration in (None, '') and price_table:
            for key in (duration_key, str(months)):
                if key is not None and str(key) in price_table:
                    return to_money(price_table[str(key)])
        return to_money(FeeCalculator.flat_rate() * months)

    @staticmethod
    def discount_for(flow: str, offer=None) -> Decimal:
        if flow == RegistrationFlows.NEW_STUDENT:
            discount = Decimal(str(getattr(settings, 'NEW_STUDENT_DISCOUNT_PERCENT', 10)))
        elif offer is not None:
            discount = Decimal(str(offer.discount_percentage))
        else:
            discount = ZERO

        if discount < 0 or discount > 100:
            raise RegistrationValidationError(
                "Discount must be between 0 and 100 percent.",
                details={'discount_percentage': [str(discount)]}
            )
        return discount

    @staticmethod
    def apply_discount(total_fee: Decimal, discount: Decimal) -> Decimal:
        return to_money(total_fee * (Decimal('1') - discount / Decimal('100')))

    @staticmethod
    def schedule(fee_after_discount: Decimal, amount_paid: Decimal):
        """(first_payment, second_payment); two halves when nothing is paid up-front."""
        if amount_paid <= 0:
            first = (fee_after_discount / 2).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
            return first, fee_after_discount - first
        return amount_paid, max(ZERO, fee_after_discount - amount_paid)

    @staticmethod
    def calculate(
        duration_key=None,
        flow: str = RegistrationFlows.NEW_STUDENT,
        registration_date: Optional[date] = None,
        price_table: Optional[Dict[str, Any]] = None,
        custom_duration=None,
        offer=None,
        amount_paid=0,
        courses=None,
        time_slot: str = '',
    ) -> BillingDetails:
        """
        Compute the full billing breakdown.

        Raises:
            RegistrationValidationError: bad duration, negative payment or discount out of range
        """
        registration_date = registration_date or institute_today()
        months = FeeCalculator.resolve_months(duration_key, custom_duration)

        paid = to_money(amount_paid or 0)
        if paid < 0:
            raise RegistrationValidationError(
                "Amount paid cannot be negative.",
                details={'amount_paid': [str(paid)]}
            )

        total = FeeCalculator.total_fee(months, duration_key, price_table, custom_duration)
        discount = FeeCalculator.discount_for(flow, offer)
        after_discount = FeeCalculator.apply_discount(total, discount)
        first, second = FeeCalculator.schedule(after_discount, paid)

        deadline_days = getattr(settings, 'PAYMENT_DEADLINE_DAYS', 30)
        courses = [c for c in (courses or []) if c]

        return BillingDetails(
            months=months,
            duration_key=str(duration_key or custom_duration or months),
            registration_date=registration_date,
            course_start_date=registration_date + timedelta(days=1),
            payment_deadline=registration_date + timedelta(days=deadline_days),
            expiration_date=registration_date + timedelta(days=months * 30),
            total_fee=total,
            discount_percentage=discount,
            fee_after_discount=after_discount,
            amount_paid=paid,
            amount_remaining=max(ZERO, after_discount - paid),
            first_payment=first,
            second_payment=second,
            course_package=', '.join(courses),
            time_slot=time_slot or '',
            courses=courses,
        )


# ============ OFFER SERVICES ============

class OfferService:

    @staticmethod
    def active_offer(today: Optional[date] = None):
        """Highest running discount; ties go to the earliest created offer."""
        Offer = _get_model('Offer')
        today = today or institute_today()
        return Offer.objects.filter(
            status=StatusChoices.ACTIVE,
            start_date__lte=today,
            end_date__gte=today,
        ).order_by('-discount_percentage', 'created_at', 'id').first()

    @staticmethod
    def expire_past_offers(today: Optional[date] = None) -> int:
        Offer = _get_model('Offer')
        today = today or institute_today()
        count = Offer.objects.filter(
            status=StatusChoices.ACTIVE,
            end_date__lt=today,
        ).update(status=StatusChoices.EXPIRED)
        if count:
            logger.info(f"Expired {count} offer(s)")
        return count


# ============ BILLING RECORD SERVICES ============

class BillingService:
    """
    Persists billing records, records installments and emits the signed PDF.
    """

    @staticmethod
    def create_billing_record(student, details: BillingDetails, signature_url: str = '', language: str = 'en'):
        BillingRecord = _get_model('BillingRecord')

        record = BillingRecord.objects.create(
            student=student,
            student_name_en=student.full_name_en,
            student_name_ar=student.full_name_ar,
            phone=student.phone1,
            course_package=details.course_package or ', '.join(student.courses or []),
            time_slot=details.time_slot or student.timing or '',
            level_count=details.months,
            registration_date=details.registration_date,
            course_start_date=details.course_start_date,
            payment_deadline=details.payment_deadline,
            last_payment_date=details.registration_date if details.amount_paid > 0 else None,
            total_fee=details.total_fee,
            discount_percentage=details.discount_percentage,
            fee_after_discount=details.fee_after_discount,
            amount_paid=details.amount_paid,
            amount_remaining=details.amount_remaining,
            first_payment=details.first_payment,
            second_payment=details.second_payment,
            language=language,
            signature_url=signature_url or '',
        )
        logger.info(f"Billing record {record.id} created for student {student.id}: {record.fee_after_discount}")
        return record

    @staticmethod
    @transaction.atomic
    def record_payment(billing_id, amount, payment_method: str, recorded_by=None, payment_date: Optional[date] = None):
        """
        Record an installment against a billing record.

        Raises:
            PaymentProcessingError: amount not positive, over the remaining balance, or no method
        """
        BillingRecord = _get_model('BillingRecord')
        PaymentHistory = _get_model('PaymentHistory')

        try:
            amount = to_money(amount)
        except RegistrationValidationError:
            raise PaymentProcessingError("Payment amount must be a number.")

        if amount <= 0:
            raise PaymentProcessingError("Payment amount must be greater than 0")
        if not (payment_method or '').strip():
            raise PaymentProcessingError("Please select a payment method")

        try:
            record = BillingRecord.objects.select_for_update().get(pk=billing_id)
        except BillingRecord.DoesNotExist:
            raise PaymentProcessingError(f"Billing record {billing_id} not found.")

        if amount > record.amount_remaining:
            raise PaymentProcessingError(
                "Payment amount cannot exceed remaining balance",
                details={'amount_remaining': str(record.amount_remaining)}
            )

        payment_date = payment_date or institute_today()
        record.amount_paid = record.amount_paid + amount
        record.amount_remaining = record.amount_remaining - amount
        record.last_payment_date = payment_date
        record.save(update_fields=['amount_paid', 'amount_remaining', 'last_payment_date', 'updated_at'])

        payment = PaymentHistory.objects.create(
            billing=record,
            student_id=record.student_id,
            amount_paid=amount,
            payment_date=payment_date,
            payment_method=payment_method.strip(),
            recorded_by=recorded_by,
        )

        logger.info(
            f"Payment {payment.id} of {amount} recorded on billing {record.id}; "
            f"remaining {record.amount_remaining}"
        )
        return record, payment

    @staticmethod
    def emit_documents(record, storage=None) -> Optional[str]:
        """
        Render the PDF, upload it and store its path on the record.
        Best-effort: failures are logged and None is returned.
        """
        from shared.storage import ArtifactStorage
        from .documents import BillingPDFGenerator

        storage = storage or ArtifactStorage()
        try:
            pdf_bytes = BillingPDFGenerator(storage=storage).render(record, language=record.language)
            path = storage.upload_billing_pdf(record.student_id, pdf_bytes, language=record.language)
            record.signed_pdf_url = path
            record.save(update_fields=['signed_pdf_url', 'updated_at'])
        except Exception as e:
            logger.error(f"Billing PDF emission failed for billing {record.id}: {e}", exc_info=True)
            return None

        logger.info(f"Billing PDF stored for billing {record.id}: {path}")
        return path

    @staticmethod
    def summary(record, storage=None) -> Dict[str, Any]:
        """JSON view of a billing record with freshly signed document links."""
        from shared.storage import ArtifactStorage

        storage = storage or ArtifactStorage()
        money = ('total_fee', 'fee_after_discount', 'amount_paid', 'amount_remaining',
                 'first_payment', 'second_payment')
        data = {
            'id': record.id,
            'student_id': record.student_id,
            'student_name_en': record.student_name_en,
            'student_name_ar': record.student_name_ar,
            'phone': record.phone,
            'course_package': record.course_package,
            'time_slot': record.time_slot,
            'level_count': record.level_count,
            'registration_date': record.registration_date.isoformat(),
            'course_start_date': record.course_start_date.isoformat(),
            'payment_deadline': record.payment_deadline.isoformat() if record.payment_deadline else None,
            'last_payment_date': record.last_payment_date.isoformat() if record.last_payment_date else None,
            'discount_percentage': str(record.discount_percentage),
            'payment_status': record.payment_status,
            'language': record.language,
            'signature_url': storage.signed_url(record.signature_url) if record.signature_url else None,
            'signed_pdf_url': storage.signed_url(record.signed_pdf_url) if record.signed_pdf_url else None,
            'payments': [
                {
                    'id': p.id,
                    'amount_paid': str(p.amount_paid),
                    'payment_date': p.payment_date.isoformat(),
                    'payment_method': p.payment_method,
                }
                for p in record.payments.all()
            ],
        }
        for name in money:
            value = getattr(record, name)
            data[name] = str(value) if value is not None else None
        data['formatted'] = {
            name: format_amount(getattr(record, name))
            for name in money if getattr(record, name) is not None
        }
        return data
