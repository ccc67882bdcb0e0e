# billing/models.py
import logging
from decimal import Decimal

from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator

from shared.constants import StatusChoices, PaymentMethods, PaymentStatus

logger = logging.getLogger(__name__)


class CoursePricing(models.Model):
    """Price per course duration in months; fallback for durations without a configured price."""
    duration_months = models.PositiveIntegerField(unique=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'course_pricing'
        ordering = ['duration_months']
        verbose_name = 'Course Pricing'
        verbose_name_plural = 'Course Pricing'

    def __str__(self):
        return f"{self.duration_months} month(s) - {self.price}"

    def clean(self):
        if self.duration_months is not None and self.duration_months <= 0:
            raise ValidationError({'duration_months': 'Duration must be at least one month.'})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class Offer(models.Model):
    """Time-boxed discount applied to admin-entered registrations."""
    offer_name = models.CharField(max_length=150)
    offer_description = models.TextField(blank=True)
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=20, choices=StatusChoices.OFFER_CHOICES, default=StatusChoices.ACTIVE)
    created_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_offers'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'offers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'start_date', 'end_date'], name='offer_status_dates_idx'),
        ]

    def __str__(self):
        return f"{self.offer_name} ({self.discount_percentage}%)"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date cannot be before start date.'})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def is_running(self, today) -> bool:
        return self.status == StatusChoices.ACTIVE and self.start_date <= today <= self.end_date


class BillingRecord(models.Model):
    """
    Signed billing agreement for one registration: the fee breakdown, the
    payment schedule and the rendered document.
    """
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='billing_records'
    )

    # Snapshot of the student at signing time
    student_name_en = models.CharField(max_length=100)
    student_name_ar = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)

    course_package = models.TextField()
    time_slot = models.TextField(blank=True, default='')
    level_count = models.PositiveIntegerField(default=1)

    registration_date = models.DateField()
    course_start_date = models.DateField()
    payment_deadline = models.DateField(null=True, blank=True)
    last_payment_date = models.DateField(null=True, blank=True)

    # Money
    total_fee = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    fee_after_discount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'), validators=[MinValueValidator(0)])
    amount_remaining = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'), validators=[MinValueValidator(0)])
    first_payment = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    second_payment = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.UNPAID)

    # Documents (storage paths; URLs are signed on demand)
    language = models.CharField(max_length=5, default='en')
    signature_url = models.CharField(max_length=500, blank=True, default='')
    signed_pdf_url = models.CharField(max_length=500, blank=True, default='')

    # Institute registration details printed on the document
    contract_number = models.CharField(max_length=50, blank=True, default='')
    commercial_registration = models.CharField(max_length=50, blank=True, default='')
    training_license = models.CharField(max_length=50, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'billing'
        ordering = ['-created_at']
        verbose_name = 'Billing Record'
        verbose_name_plural = 'Billing Records'
        indexes = [
            models.Index(fields=['student', 'created_at'], name='billing_student_created_idx'),
            models.Index(fields=['payment_status'], name='billing_status_idx'),
        ]

    def __str__(self):
        return f"Billing #{self.pk} - {self.student_name_en}"

    @property
    def is_fully_paid(self) -> bool:
        return self.amount_remaining <= 0

    def clean(self):
        if self.course_start_date and self.registration_date and self.course_start_date < self.registration_date:
            raise ValidationError({'course_start_date': 'Course cannot start before registration.'})

    def refresh_payment_status(self):
        if self.amount_remaining <= 0:
            self.payment_status = PaymentStatus.PAID
        elif self.amount_paid > 0:
            self.payment_status = PaymentStatus.PARTIAL
        else:
            self.payment_status = PaymentStatus.UNPAID

    def save(self, *args, **kwargs):
        """Save with validation; payment_status follows the balance."""
        self.refresh_payment_status()
        if kwargs.get('update_fields') is not None and 'payment_status' not in kwargs['update_fields']:
            kwargs['update_fields'] = list(kwargs['update_fields']) + ['payment_status']
        self.full_clean()
        super().save(*args, **kwargs)


class PaymentHistory(models.Model):
    """One recorded installment against a billing record."""
    billing = models.ForeignKey(BillingRecord, on_delete=models.CASCADE, related_name='payments')
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='payments')
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    payment_date = models.DateField()
    payment_method = models.CharField(max_length=50, default=PaymentMethods.DEFAULT)
    recorded_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payment_history'
        ordering = ['-payment_date', '-created_at']
        verbose_name = 'Payment'
        verbose_name_plural = 'Payment History'

    def __str__(self):
        return f"{self.amount_paid} on {self.payment_date} ({self.payment_method})"
