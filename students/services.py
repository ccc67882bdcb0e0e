# students/services.py
"""
STUDENT SERVICES - student creation, auto-enrollment, course expiry and membership renewal.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import timedelta, date
from typing import Optional, List, Dict, Any

from django.apps import apps
from django.core.exceptions import ValidationError
from django.db import transaction

# SHARED IMPORTS
from shared.constants import StatusChoices, ConfigTypes, RegistrationFlows
from shared.helpers import institute_today
from core.exceptions import RegistrationValidationError
from core.services import ConfigurationService, level_key, normalize_text

logger = logging.getLogger(__name__)


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'students'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


# ============ STUDENT SERVICES ============

class StudentService:
    """
    Service for student-related business logic.
    """

    REQUIRED_FIELDS = ('full_name_ar', 'full_name_en', 'phone1', 'email', 'national_id', 'registration_date')

    @staticmethod
    def create_student(student_data: Dict[str, Any], user=None):
        """
        Create the student row from mapped registration data.

        Raises:
            RegistrationValidationError: required data missing or invalid
        """
        Student = _get_model('Student')

        missing = [f for f in StudentService.REQUIRED_FIELDS if not student_data.get(f)]
        if missing:
            raise RegistrationValidationError(
                "Missing required student information.",
                details={'missing': missing}
            )

        allowed = {f.name for f in Student._meta.get_fields() if getattr(f, 'concrete', False)}
        allowed.add('branch_id')
        payload = {k: v for k, v in student_data.items() if k in allowed}

        try:
            student = Student.objects.create(user=user, **payload)
        except ValidationError as e:
            logger.warning(f"Student validation failed: {e}")
            raise RegistrationValidationError(
                "Invalid student information.",
                details=getattr(e, 'message_dict', {'__all__': e.messages})
            )

        logger.info(f"Student created: {student.full_name_en} (id={student.id})")
        return student

    @staticmethod
    def attach_signature(student, signature_url: str):
        student.signature_url = signature_url
        student.save(update_fields=['signature_url', 'updated_at'])
        return student


# ============ ENROLLMENT SERVICES ============

@dataclass
class AutoEnrollResult:
    count: int = 0
    class_ids: List[int] = field(default_factory=list)
    earliest_start_date: Optional[date] = None

    def to_dict(self):
        return {
            'count': self.count,
            'class_ids': self.class_ids,
            'earliest_start_date': self.earliest_start_date.isoformat() if self.earliest_start_date else None,
        }


class EnrollmentService:
    """
    Enrolls students into active classes of their branch whose timing,
    courses and levels line up with the registration.
    """

    @staticmethod
    def _level_keys(values) -> set:
        return {level_key(v) or normalize_text(v) for v in values if v and str(v).strip()}

    @staticmethod
    def is_eligible(student, cls) -> bool:
        if student.timing and cls.timing != student.timing:
            return False

        student_courses = {normalize_text(c) for c in student.courses or [] if c}
        if student_courses:
            class_courses = {normalize_text(c) for c in cls.courses or []}
            if not student_courses & class_courses:
                return False

        student_levels = EnrollmentService._level_keys(student.levels or [])
        if student_levels:
            if not student_levels & EnrollmentService._level_keys(cls.levels or []):
                return False

        return True

    @staticmethod
    def auto_enroll(student) -> AutoEnrollResult:
        ClassOffering = _get_model('ClassOffering', 'core')
        Enrollment = _get_model('Enrollment')
        StudentTeacher = _get_model('StudentTeacher')

        classes = ClassOffering.objects.filter(status=StatusChoices.ACTIVE)
        if student.branch_id:
            classes = classes.filter(branch_id=student.branch_id)

        eligible = [cls for cls in classes.order_by('id') if EnrollmentService.is_eligible(student, cls)]
        if not eligible:
            logger.info(f"No matching classes for student {student.id}")
            return AutoEnrollResult()

        for cls in eligible:
            Enrollment.objects.get_or_create(student=student, class_offering=cls)
            if cls.teacher_id:
                StudentTeacher.objects.get_or_create(student=student, teacher_id=cls.teacher_id)

        start_dates = sorted(cls.start_date for cls in eligible if cls.start_date)
        result = AutoEnrollResult(
            count=len(eligible),
            class_ids=[cls.id for cls in eligible],
            earliest_start_date=start_dates[0] if start_dates else None,
        )
        logger.info(f"Auto-enrolled student {student.id} in {result.count} class(es)")
        return result

    @staticmethod
    def current_enrollment(student) -> AutoEnrollResult:
        """The student's existing enrollments in the auto_enroll result shape."""
        Enrollment = _get_model('Enrollment')

        classes = [
            e.class_offering for e in
            Enrollment.objects.filter(student=student).select_related('class_offering').order_by('class_offering_id')
        ]
        start_dates = sorted(cls.start_date for cls in classes if cls.start_date)
        return AutoEnrollResult(
            count=len(classes),
            class_ids=[cls.id for cls in classes],
            earliest_start_date=start_dates[0] if start_dates else None,
        )


# ============ COURSE EXPIRY ============

class CourseExpiryService:
    """Daily housekeeping for subscriptions, classes and offers."""

    WARNING_DAYS = 7

    @staticmethod
    def expire_students(today: date) -> int:
        Student = _get_model('Student')
        count = Student.objects.filter(
            subscription_status=StatusChoices.ACTIVE,
            expiration_date__lt=today,
        ).update(subscription_status=StatusChoices.EXPIRED)
        if count:
            logger.info(f"Expired {count} student subscription(s)")
        return count

    @staticmethod
    def expiring_soon(today: date, days: int = WARNING_DAYS):
        Student = _get_model('Student')
        return Student.objects.filter(
            subscription_status=StatusChoices.ACTIVE,
            expiration_date__gte=today,
            expiration_date__lte=today + timedelta(days=days),
        ).order_by('expiration_date')

    @staticmethod
    def complete_finished_classes(today: date) -> int:
        ClassOffering = _get_model('ClassOffering', 'core')
        count = ClassOffering.objects.filter(
            status=StatusChoices.ACTIVE,
            end_date__lt=today,
        ).update(status=StatusChoices.COMPLETED)
        if count:
            logger.info(f"Marked {count} class(es) completed")
        return count

    @staticmethod
    def run(today: date) -> Dict[str, Any]:
        from billing.services import OfferService

        expired = CourseExpiryService.expire_students(today)
        expiring = list(CourseExpiryService.expiring_soon(today))
        completed = CourseExpiryService.complete_finished_classes(today)
        offers = OfferService.expire_past_offers(today)

        return {
            'expired_students_updated': expired,
            'students_expiring_soon': len(expiring),
            'classes_completed': completed,
            'offers_expired': offers,
            'expiring_students': [
                {
                    'name': s.full_name_en,
                    'email': s.email,
                    'expiration_date': s.expiration_date.isoformat(),
                }
                for s in expiring
            ],
        }


# ============ MEMBERSHIP RENEWAL ============

class RenewalService:
    """
    Restarts an expired membership: new levels, timings and duration, a
    fresh subscription window and a new billing record. No discount applies.
    """

    @staticmethod
    def _clean_list(values) -> List[str]:
        if isinstance(values, str):
            values = values.split(',')
        cleaned = []
        for value in values or []:
            value = str(value).strip()
            if value and value not in cleaned:
                cleaned.append(value)
        return cleaned

    @staticmethod
    def can_renew(student, today: date) -> bool:
        if student.subscription_status != StatusChoices.ACTIVE:
            return True
        return bool(student.expiration_date and student.expiration_date < today)

    @staticmethod
    def membership(student, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or institute_today()
        expiration = student.expiration_date
        return {
            'student_id': student.id,
            'subscription_status': student.subscription_status,
            'expiration_date': expiration.isoformat() if expiration else None,
            'days_remaining': max(0, (expiration - today).days) if expiration else None,
            'course_level': student.course_level,
            'timing': student.timing,
            'can_renew': RenewalService.can_renew(student, today),
        }

    @staticmethod
    def renew(student, levels, timings, duration_key, amount_paid=0,
              registration_date: Optional[date] = None, language: str = 'en'):
        """
        Renew the student's membership.

        Returns (student, billing_record, billing_details).

        Raises:
            RegistrationValidationError: still active, or levels/timings/duration missing
        """
        from billing.services import FeeCalculator, BillingService

        registration_date = registration_date or institute_today()
        if not RenewalService.can_renew(student, registration_date):
            raise RegistrationValidationError(
                "Your membership is still active.",
                details={'expiration_date': [student.expiration_date.isoformat()]}
            )

        levels = RenewalService._clean_list(levels)
        timings = RenewalService._clean_list(timings)
        duration_key = str(duration_key or '').strip()
        price_table = ConfigurationService.duration_price_table()
        durations = {o.key for o in ConfigurationService.load(ConfigTypes.COURSE_DURATION)} | set(price_table)

        errors = {}
        if not levels:
            errors['levels'] = ["Please select levels"]
        if not timings:
            errors['timings'] = ["Please select timings"]
        if duration_key not in durations:
            errors['course_duration'] = ["Please select duration"]
        if errors:
            raise RegistrationValidationError("Please complete the renewal form.", details=errors)

        details = FeeCalculator.calculate(
            duration_key=duration_key,
            flow=RegistrationFlows.PREVIOUS_STUDENT,
            registration_date=registration_date,
            price_table=price_table,
            amount_paid=amount_paid,
            courses=levels,
            time_slot=', '.join(timings),
        )
        # Renewals start at once and bill what was paid now against the rest
        details = replace(
            details,
            course_start_date=details.registration_date,
            first_payment=details.amount_paid,
            second_payment=details.amount_remaining,
        )

        with transaction.atomic():
            student.course_level = ', '.join(levels)
            student.levels = levels
            student.timing = ', '.join(timings)
            student.course_duration_months = details.months
            student.registration_date = details.registration_date
            student.expiration_date = details.expiration_date
            student.next_payment_date = details.payment_deadline
            student.subscription_status = StatusChoices.ACTIVE
            student.save()

            record = BillingService.create_billing_record(student, details, language=language)

        logger.info(
            f"Membership renewed for student {student.id}: {details.months} month(s) "
            f"until {details.expiration_date}, billing {record.id}"
        )
        return student, record, details
