# admissions/models.py
"""
Submission bookkeeping for the registration saga.
"""
import logging

from django.db import models
from django.conf import settings

from shared.constants import StatusChoices, RegistrationFlows

logger = logging.getLogger(__name__)


class RegistrationSubmission(models.Model):
    """
    One submit attempt keyed by its idempotency key. Completed steps and the
    ids they produced are recorded so a retry resumes instead of duplicating.
    """
    STEP_ACCOUNT = 'account'
    STEP_ROLE = 'role'
    STEP_STUDENT = 'student'
    STEP_SIGNATURE = 'signature'
    STEP_BILLING = 'billing_record'
    STEP_TEACHERS = 'teachers'
    STEP_ENROLLMENT = 'enrollment'
    STEP_DOCUMENTS = 'documents'
    STEP_PROFILE = 'profile'

    idempotency_key = models.CharField(max_length=255, unique=True)
    flow = models.CharField(max_length=30, choices=RegistrationFlows.CHOICES)
    email = models.EmailField(db_index=True)
    status = models.CharField(
        max_length=20,
        choices=StatusChoices.SUBMISSION_CHOICES,
        default=StatusChoices.PENDING
    )
    completed_steps = models.JSONField(default=list, blank=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='registration_submissions'
    )
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='submissions'
    )
    billing = models.ForeignKey(
        'billing.BillingRecord',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='submissions'
    )
    signature_path = models.CharField(max_length=500, blank=True, default='')

    error = models.TextField(blank=True, default='')
    result = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'registration_submissions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='submission_status_idx'),
        ]

    def __str__(self):
        return f"{self.email} [{self.status}]"

    def has_completed(self, step: str) -> bool:
        return step in (self.completed_steps or [])

    def mark_step(self, step: str, **fields):
        """Record a finished step together with any ids it produced."""
        if step not in self.completed_steps:
            self.completed_steps = list(self.completed_steps) + [step]
        for name, value in fields.items():
            setattr(self, name, value)
        self.save(update_fields=['completed_steps', 'updated_at', *fields.keys()])
