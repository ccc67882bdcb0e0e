# students/models.py
"""
Student records, teacher links and class enrollments.
"""
import logging

from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError

# SHARED IMPORTS
from shared.constants import StatusChoices, PaymentMethods, RegistrationFlows

logger = logging.getLogger(__name__)


class Student(models.Model):
    """
    Durable record created when a registration is submitted; later edited
    by admins and by payment recording.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='student_profile'
    )

    GENDER_CHOICES = (
        ('male', 'Male'),
        ('female', 'Female'),
    )

    # Personal information
    full_name_ar = models.CharField(max_length=100)
    full_name_en = models.CharField(max_length=100)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default='')
    phone1 = models.CharField(max_length=20)
    phone2 = models.CharField(max_length=20, blank=True, default='')
    email = models.EmailField(db_index=True)
    national_id = models.CharField(max_length=20)

    # Course selection
    branch = models.ForeignKey(
        'core.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students'
    )
    branch_name = models.CharField(max_length=150, blank=True, default='')
    program = models.CharField(max_length=255, blank=True, default='')
    class_type = models.CharField(max_length=50, blank=True, default='')
    course_level = models.TextField(blank=True, default='')
    courses = models.JSONField(default=list, blank=True)
    levels = models.JSONField(default=list, blank=True)
    timing = models.TextField(blank=True, default='')
    payment_method = models.CharField(max_length=50, default=PaymentMethods.DEFAULT)

    # Subscription
    subscription_status = models.CharField(
        max_length=20,
        choices=StatusChoices.SUBSCRIPTION_CHOICES,
        default=StatusChoices.ACTIVE
    )
    course_duration_months = models.PositiveIntegerField(default=1)
    registration_date = models.DateField()
    next_payment_date = models.DateField(null=True, blank=True)
    expiration_date = models.DateField(null=True, blank=True)

    registration_flow = models.CharField(
        max_length=30,
        choices=RegistrationFlows.CHOICES,
        default=RegistrationFlows.NEW_STUDENT
    )
    signature_url = models.CharField(max_length=500, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        indexes = [
            models.Index(fields=['subscription_status', 'expiration_date'], name='student_sub_expiry_idx'),
            models.Index(fields=['branch', 'subscription_status'], name='student_branch_sub_idx'),
            models.Index(fields=['full_name_en'], name='student_name_en_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name_en} ({self.email})"

    @property
    def is_expired(self) -> bool:
        return self.subscription_status == StatusChoices.EXPIRED

    def clean(self):
        if self.course_duration_months is not None and self.course_duration_months <= 0:
            raise ValidationError({'course_duration_months': 'Duration must be at least one month.'})

        if self.expiration_date and self.registration_date and self.expiration_date < self.registration_date:
            raise ValidationError({'expiration_date': 'Expiration cannot precede registration.'})

    def save(self, *args, **kwargs):
        """Save with validation; branch_name follows the branch."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.branch and not self.branch_name:
            self.branch_name = self.branch.display_name()
        self.full_clean()
        super().save(*args, **kwargs)


class StudentTeacher(models.Model):
    """Derived student <-> teacher link; written only by TeacherAssignmentRules and auto-enrollment."""
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='teacher_links')
    teacher = models.ForeignKey('users.Teacher', on_delete=models.CASCADE, related_name='student_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'student_teachers'
        constraints = [
            models.UniqueConstraint(fields=['student', 'teacher'], name='unique_student_teacher'),
        ]

    def __str__(self):
        return f"{self.student} -> {self.teacher}"


class Enrollment(models.Model):
    """
    Tracks student enrollment in scheduled classes.
    """
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='enrollments'
    )
    class_offering = models.ForeignKey(
        'core.ClassOffering',
        on_delete=models.CASCADE,
        related_name='enrollments'
    )
    enrollment_date = models.DateField(auto_now_add=True)

    class Meta:
        db_table = 'enrollments'
        verbose_name = 'Enrollment'
        verbose_name_plural = 'Enrollments'
        constraints = [
            models.UniqueConstraint(fields=['student', 'class_offering'], name='unique_student_class'),
        ]

    def __str__(self):
        return f"{self.student} - {self.class_offering}"
