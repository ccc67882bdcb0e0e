# admissions/services.py
"""
REGISTRATION SUBMISSION - the saga that turns a finished draft into an
account, a student, a signed billing record and its documents.

Each write is independent (no wrapping transaction). Progress is recorded
on a RegistrationSubmission row so a retry with the same idempotency key
resumes after the last completed step.
"""
import logging
from typing import Dict, Any, Optional

from django.apps import apps

# SHARED IMPORTS
from shared.constants import Roles, StatusChoices, RegistrationFlows
from shared.helpers import institute_today
from shared.storage import ArtifactStorage
from shared.utils import IdempotencyService
from core.exceptions import (
    InstituteManagementException,
    RegistrationValidationError,
    DuplicateEmailError,
    BackendOperationError,
    SubmissionInProgressError,
)
from core.services import ConfigurationService
from users.services import AccountService, TeacherAssignmentRules
from students.services import StudentService, EnrollmentService
from billing.services import FeeCalculator, OfferService, BillingService

from .wizard import RegistrationDraft

logger = logging.getLogger(__name__)


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'admissions'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


def compute_billing(draft: RegistrationDraft, flow: str, registration_date=None):
    """Fee breakdown for a draft; used by the preview and by submission."""
    offer = None if flow == RegistrationFlows.NEW_STUDENT else OfferService.active_offer(registration_date)
    amount_paid = '0' if flow == RegistrationFlows.NEW_STUDENT else (draft.amount_paid or '0')

    return FeeCalculator.calculate(
        duration_key=draft.course_duration or None,
        flow=flow,
        registration_date=registration_date,
        price_table=ConfigurationService.duration_price_table(),
        custom_duration=draft.custom_duration,
        offer=offer,
        amount_paid=amount_paid,
        courses=draft.selected_courses or draft.selected_levels,
        time_slot=draft.timing,
    )


# ============ SUBMISSION SERVICE ============

class RegistrationSubmissionService:

    IDEMPOTENCY_SCOPE = 'registration'

    @staticmethod
    def completed_result(idempotency_key) -> Optional[Dict[str, Any]]:
        Submission = _get_model('RegistrationSubmission')
        submission = Submission.objects.filter(
            idempotency_key=idempotency_key, status=StatusChoices.COMPLETED
        ).first()
        return submission.result if submission else None

    @staticmethod
    def submit(draft: RegistrationDraft, flow: str, signature_png, idempotency_key: str,
               language: str = 'en', storage: Optional[ArtifactStorage] = None) -> Dict[str, Any]:
        """
        Run (or resume) the registration saga.

        Returns the stored result dict on success or on a replay of a
        completed key.

        Raises:
            RegistrationValidationError: draft incomplete or signature missing (no writes)
            DuplicateEmailError: the email is already registered (no writes)
            SubmissionInProgressError: the same key is being processed right now
            BackendOperationError: a write failed; completed steps are kept for retry
        """
        Submission = _get_model('RegistrationSubmission')

        if not idempotency_key:
            raise RegistrationValidationError("Missing idempotency key.")

        submission = Submission.objects.filter(idempotency_key=idempotency_key).first()
        if submission and submission.status == StatusChoices.COMPLETED:
            logger.info(f"Replaying completed registration {submission.id}")
            return submission.result

        lock_key = IdempotencyService.get_key(RegistrationSubmissionService.IDEMPOTENCY_SCOPE, idempotency_key)
        if not IdempotencyService.check_and_lock(lock_key):
            raise SubmissionInProgressError()

        try:
            RegistrationSubmissionService._check_submittable(draft, signature_png)

            if not (submission and submission.user_id):
                if AccountService.email_unavailable(draft.email):
                    logger.info(f"Registration rejected, email already registered: {draft.email}")
                    raise DuplicateEmailError()
        except InstituteManagementException:
            IdempotencyService.mark_failed(lock_key)
            raise

        if submission is None:
            submission = Submission.objects.create(
                idempotency_key=idempotency_key,
                flow=flow,
                email=draft.email,
            )

        submission.status = StatusChoices.IN_PROGRESS
        submission.error = ''
        submission.save(update_fields=['status', 'error', 'updated_at'])

        try:
            result = RegistrationSubmissionService._run(
                submission, draft, flow, signature_png, language, storage or ArtifactStorage()
            )
        except Exception as e:
            submission.status = StatusChoices.FAILED
            submission.error = str(e)[:2000]
            submission.save(update_fields=['status', 'error', 'updated_at'])
            IdempotencyService.mark_failed(lock_key)

            logger.error(
                f"Registration {submission.id} failed after {submission.completed_steps}: {e}",
                exc_info=True
            )
            if isinstance(e, InstituteManagementException):
                raise
            raise BackendOperationError(
                "Registration could not be completed. Please try again.",
                details={'completed_steps': submission.completed_steps}
            ) from e

        submission.status = StatusChoices.COMPLETED
        submission.result = result
        submission.save(update_fields=['status', 'result', 'updated_at'])
        IdempotencyService.mark_processed(lock_key)

        logger.info(f"Registration {submission.id} completed for {draft.email}")
        return result

    @staticmethod
    def _check_submittable(draft: RegistrationDraft, signature_png):
        errors = {}
        if not signature_png:
            errors['signature'] = ["Please sign the billing form first"]
        for name in ('email', 'password_hash', 'full_name_en', 'full_name_ar', 'phone1', 'national_id'):
            if not getattr(draft, name):
                errors.setdefault(name, []).append("This field is required.")
        if errors:
            raise RegistrationValidationError("Missing registration data", details=errors)

    @staticmethod
    def _run(submission, draft: RegistrationDraft, flow: str, signature_png, language, storage) -> Dict[str, Any]:
        Student = _get_model('Student', 'students')
        BillingRecord = _get_model('BillingRecord', 'billing')

        # 1. Account
        if submission.has_completed(submission.STEP_ACCOUNT):
            user = submission.user
        else:
            user = AccountService.create_account(
                draft.email,
                draft.password_hash,
                full_name_en=draft.full_name_en,
                full_name_ar=draft.full_name_ar,
                phone_number=draft.phone1,
            )
            submission.mark_step(submission.STEP_ACCOUNT, user=user)

        # 2. Role
        if not submission.has_completed(submission.STEP_ROLE):
            AccountService.assign_role(user, Roles.STUDENT)
            submission.mark_step(submission.STEP_ROLE)

        # 3. Billing computation (pure)
        registration_date = (
            submission.student.registration_date if submission.student_id else institute_today()
        )
        details = compute_billing(draft, flow, registration_date)

        # 4. Student
        if submission.has_completed(submission.STEP_STUDENT):
            student = Student.objects.get(pk=submission.student_id)
        else:
            student = StudentService.create_student({
                'full_name_ar': draft.full_name_ar,
                'full_name_en': draft.full_name_en,
                'gender': draft.gender,
                'phone1': draft.phone1,
                'phone2': draft.phone2,
                'email': draft.email,
                'national_id': draft.national_id,
                'branch_id': draft.branch_id,
                'program': draft.program,
                'class_type': draft.class_type,
                'course_level': ', '.join(draft.selected_levels or draft.selected_courses),
                'courses': draft.selected_courses,
                'levels': draft.selected_levels,
                'timing': draft.timing,
                'payment_method': draft.payment_method,
                'subscription_status': StatusChoices.ACTIVE,
                'course_duration_months': details.months,
                'registration_date': details.registration_date,
                'next_payment_date': details.payment_deadline if details.amount_remaining > 0 else None,
                'expiration_date': details.expiration_date,
                'registration_flow': flow,
            }, user=user)
            submission.mark_step(submission.STEP_STUDENT, student=student)

        # 5. Signature
        if submission.has_completed(submission.STEP_SIGNATURE):
            signature_path = submission.signature_path
        else:
            signature_path = storage.upload_signature(user.id, signature_png)
            StudentService.attach_signature(student, signature_path)
            submission.mark_step(submission.STEP_SIGNATURE, signature_path=signature_path)

        # 6. Billing record
        if submission.has_completed(submission.STEP_BILLING):
            record = BillingRecord.objects.get(pk=submission.billing_id)
        else:
            record = BillingService.create_billing_record(student, details, signature_path, language=language)
            submission.mark_step(submission.STEP_BILLING, billing=record)

        # 7-9. Best-effort side effects
        RegistrationSubmissionService._best_effort(
            submission, submission.STEP_TEACHERS,
            lambda: sorted(TeacherAssignmentRules.link_student(
                student, draft.selected_courses, draft.teacher_selections
            )),
        )
        enrollment = RegistrationSubmissionService._best_effort(
            submission, submission.STEP_ENROLLMENT,
            lambda: EnrollmentService.auto_enroll(student).to_dict(),
        )
        RegistrationSubmissionService._best_effort(
            submission, submission.STEP_DOCUMENTS,
            lambda: BillingService.emit_documents(record, storage=storage),
        )

        # 10. Profile
        if not submission.has_completed(submission.STEP_PROFILE):
            AccountService.update_profile(
                user,
                full_name_en=draft.full_name_en,
                full_name_ar=draft.full_name_ar,
                phone_number=draft.phone1,
            )
            submission.mark_step(submission.STEP_PROFILE)

        # Steps finished on an earlier attempt are reported from their rows
        if enrollment is None and submission.has_completed(submission.STEP_ENROLLMENT):
            enrollment = EnrollmentService.current_enrollment(student).to_dict()

        record.refresh_from_db()
        return {
            'user_id': user.id,
            'student_id': student.id,
            'billing_id': record.id,
            'email': student.email,
            'teacher_ids': sorted(student.teacher_links.values_list('teacher_id', flat=True)),
            'enrollment': enrollment,
            'billing': details.to_dict(),
            'has_pdf': bool(record.signed_pdf_url),
        }

    @staticmethod
    def _best_effort(submission, step: str, action):
        """Run a non-critical step; failures are logged and the saga continues (retried on resume)."""
        if submission.has_completed(step):
            return None
        try:
            value = action()
        except Exception as e:
            logger.warning(f"Registration {submission.id}: {step} skipped: {e}", exc_info=True)
            return None
        if value is not None:
            submission.mark_step(step)
        return value
