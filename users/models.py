# users/models.py
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
import logging

# SHARED IMPORTS
from shared.constants import Roles

from .managers import UserManager

logger = logging.getLogger(__name__)


class User(AbstractUser):
    """Portal account; email is the login. Holds the profile fields too."""

    username = models.CharField(
        _("username"),
        max_length=150,
        blank=True,
        null=True,
        help_text=_("Optional. 150 characters or fewer."),
    )

    email = models.EmailField(_("email address"), unique=True)
    full_name_en = models.CharField(max_length=100, blank=True, default='')
    full_name_ar = models.CharField(max_length=100, blank=True, default='')
    phone_number = models.CharField(max_length=20, blank=True, null=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'auth_user'
        indexes = [
            models.Index(fields=['phone_number'], name='user_phone_idx'),
        ]

    def __str__(self):
        return self.email

    def clean(self):
        super().clean()
        if self.email:
            self.email = self.email.strip().lower()
            duplicate = User.objects.filter(email__iexact=self.email).exclude(pk=self.pk)
            if duplicate.exists():
                raise ValidationError({'email': 'A user with this email already exists.'})

    @property
    def roles(self):
        return list(self.user_roles.values_list('role', flat=True))


class UserRole(models.Model):
    """Portal role assignment (student / teacher / admin)."""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='user_roles')
    role = models.CharField(max_length=20, choices=Roles.CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_roles'
        constraints = [
            models.UniqueConstraint(fields=['user', 'role'], name='unique_user_role'),
        ]
        indexes = [
            models.Index(fields=['role'], name='user_role_idx'),
        ]

    def __str__(self):
        return f"{self.user.email} ({self.role})"


class Teacher(models.Model):
    """Teacher record; may exist before the teacher has a portal account."""
    user = models.OneToOneField(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='teacher_profile'
    )
    full_name = models.CharField(max_length=150)
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=20, blank=True, default='')
    courses_assigned = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'teachers'
        ordering = ['id']

    def __str__(self):
        return self.full_name


class TeacherCourseRule(models.Model):
    """
    Explicit course -> teacher rule. A course matches when its number falls
    inside [min_number, max_number] or its name contains one of the keywords.
    """
    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name='course_rules')
    min_number = models.PositiveIntegerField(null=True, blank=True)
    max_number = models.PositiveIntegerField(null=True, blank=True)
    keywords = models.JSONField(default=list, blank=True)
    priority = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'teacher_course_rules'
        ordering = ['priority', 'id']

    def __str__(self):
        bounds = f"{self.min_number}-{self.max_number}" if self.min_number is not None else "-"
        return f"{self.teacher} [{bounds}] {', '.join(self.keywords or [])}"

    def clean(self):
        if (self.min_number is None) != (self.max_number is None):
            raise ValidationError('Both range bounds must be set together.')
        if self.min_number is not None and self.min_number > self.max_number:
            raise ValidationError({'max_number': 'Upper bound must not be below lower bound.'})
        if self.min_number is None and not self.keywords:
            raise ValidationError('A rule needs a number range or at least one keyword.')

    def matches(self, number, course_name) -> bool:
        if number is not None and self.min_number is not None:
            if self.min_number <= number <= self.max_number:
                return True
        name = (course_name or '').lower()
        return any(keyword.lower() in name for keyword in self.keywords or [])

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
