# core/models.py
"""
Core institute models: admin-editable configuration rows, branches and
the scheduled class offerings that drive eligibility filtering.
"""
import logging

from django.db import models
from django.core.exceptions import ValidationError

# SHARED IMPORTS
from shared.constants import StatusChoices, ConfigTypes

logger = logging.getLogger(__name__)


# ============ CONFIGURATION ITEM ============

class ConfigurationItem(models.Model):
    """
    Generic key/value row used to drive dropdown choices.
    `config_value` is a plain string, except for courses where it holds
    JSON {"label", "category"}; see core.config_values for the codecs.
    """
    config_type = models.CharField(max_length=30, choices=ConfigTypes.CHOICES, db_index=True)
    config_key = models.CharField(max_length=150)
    config_value = models.TextField()
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'form_configurations'
        ordering = ['config_type', 'display_order', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['config_type', 'config_key'],
                name='unique_config_key_per_type'
            ),
        ]
        indexes = [
            models.Index(fields=['config_type', 'is_active', 'display_order'], name='config_type_active_idx'),
        ]

    def __str__(self):
        return f"{self.config_type}:{self.config_key}"

    def clean(self):
        if self.price is not None and self.price < 0:
            raise ValidationError({'price': 'Price cannot be negative.'})
        if not (self.config_key or '').strip():
            raise ValidationError({'config_key': 'Key is required.'})


# ============ BRANCH ============

class Branch(models.Model):
    """Physical (or online) institute location."""
    name_en = models.CharField(max_length=150)
    name_ar = models.CharField(max_length=150, blank=True, default='')
    is_online = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'branches'
        ordering = ['name_en']
        verbose_name_plural = "Branches"

    def __str__(self):
        return self.name_en

    def display_name(self, language='en') -> str:
        if language == 'ar' and self.name_ar:
            return self.name_ar
        return self.name_en


# ============ CLASS OFFERING ============

class ClassOffering(models.Model):
    """
    A scheduled, branch-located course/level combination with a fixed timing.
    Only active classes contribute to branch eligibility and timing availability.
    """
    branch = models.ForeignKey(
        Branch,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='classes'
    )
    class_name = models.CharField(max_length=150)
    timing = models.CharField(max_length=100, blank=True, default='')
    courses = models.JSONField(default=list, blank=True)
    levels = models.JSONField(default=list, blank=True)
    program = models.CharField(max_length=100, blank=True, default='')
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=StatusChoices.CLASS_CHOICES,
        default=StatusChoices.ACTIVE
    )
    teacher = models.ForeignKey(
        'users.Teacher',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='classes'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'classes'
        ordering = ['id']
        indexes = [
            models.Index(fields=['branch', 'status'], name='class_branch_status_idx'),
            models.Index(fields=['status', 'end_date'], name='class_status_end_idx'),
        ]

    def __str__(self):
        return f"{self.class_name} ({self.timing or 'no timing'})"

    @property
    def is_active(self) -> bool:
        return self.status == StatusChoices.ACTIVE

    def clean(self):
        if not isinstance(self.courses, list):
            raise ValidationError({'courses': 'Courses must be a list.'})
        if not isinstance(self.levels, list):
            raise ValidationError({'levels': 'Levels must be a list.'})
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date cannot be before start date.'})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
