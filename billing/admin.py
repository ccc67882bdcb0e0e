# billing/admin.py
from django.contrib import admin
from django.utils.html import format_html
from django.urls import reverse

from shared.constants import PaymentStatus

from .models import CoursePricing, Offer, BillingRecord, PaymentHistory
from .services import format_amount


@admin.register(CoursePricing)
class CoursePricingAdmin(admin.ModelAdmin):
    list_display = ['duration_months', 'price', 'updated_at']
    list_editable = ['price']
    ordering = ['duration_months']


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ['offer_name', 'discount_percentage', 'start_date', 'end_date', 'status', 'created_at']
    list_filter = ['status', 'start_date']
    search_fields = ['offer_name', 'offer_description']
    list_editable = ['status']
    raw_id_fields = ['created_by']

    fieldsets = (
        ('Offer', {
            'fields': ('offer_name', 'offer_description', 'discount_percentage')
        }),
        ('Validity', {
            'fields': ('start_date', 'end_date', 'status')
        }),
        ('Metadata', {
            'fields': ('created_by',)
        }),
    )

    def save_model(self, request, obj, form, change):
        if not change and not obj.created_by_id:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


class PaymentHistoryInline(admin.TabularInline):
    model = PaymentHistory
    extra = 0
    fields = ['amount_paid', 'payment_date', 'payment_method', 'recorded_by']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        # Installments go through BillingService.record_payment
        return False


@admin.register(BillingRecord)
class BillingRecordAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'student_link', 'course_package', 'fee_formatted',
        'remaining_formatted', 'status_badge', 'registration_date'
    ]
    list_filter = ['payment_status', 'language', 'registration_date']
    search_fields = ['student_name_en', 'student_name_ar', 'phone', 'student__email']
    readonly_fields = ['created_at', 'updated_at', 'payment_status', 'signature_url', 'signed_pdf_url']
    date_hierarchy = 'registration_date'
    raw_id_fields = ['student']
    inlines = [PaymentHistoryInline]

    fieldsets = (
        ('Client', {
            'fields': ('student', 'student_name_en', 'student_name_ar', 'phone')
        }),
        ('Course', {
            'fields': ('course_package', 'time_slot', 'level_count', 'registration_date', 'course_start_date')
        }),
        ('Amount Details', {
            'fields': (
                'total_fee', 'discount_percentage', 'fee_after_discount',
                'amount_paid', 'amount_remaining', 'first_payment', 'second_payment'
            )
        }),
        ('Payment Status', {
            'fields': ('payment_status', 'payment_deadline', 'last_payment_date')
        }),
        ('Documents', {
            'fields': ('language', 'signature_url', 'signed_pdf_url',
                       'contract_number', 'commercial_registration', 'training_license')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def fee_formatted(self, obj):
        return format_amount(obj.fee_after_discount)
    fee_formatted.short_description = 'Fee'

    def remaining_formatted(self, obj):
        return format_amount(obj.amount_remaining)
    remaining_formatted.short_description = 'Remaining'

    def status_badge(self, obj):
        status_colors = {
            PaymentStatus.UNPAID: 'red',
            PaymentStatus.PARTIAL: 'orange',
            PaymentStatus.PAID: 'green',
        }
        color = status_colors.get(obj.payment_status, 'gray')
        return format_html(
            '<span style="background: {}; color: white; padding: 2px 8px; border-radius: 10px;">{}</span>',
            color, obj.get_payment_status_display()
        )
    status_badge.short_description = 'Status'

    def student_link(self, obj):
        url = reverse('admin:students_student_change', args=[obj.student_id])
        return format_html('<a href="{}">{}</a>', url, obj.student_name_en)
    student_link.short_description = 'Student'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('student')


@admin.register(PaymentHistory)
class PaymentHistoryAdmin(admin.ModelAdmin):
    list_display = ['billing', 'student', 'amount_paid', 'payment_date', 'payment_method']
    list_filter = ['payment_method', 'payment_date']
    search_fields = ['student__full_name_en', 'billing__id']
    raw_id_fields = ['billing', 'student', 'recorded_by']
