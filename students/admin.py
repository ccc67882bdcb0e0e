# students/admin.py
from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Student, StudentTeacher, Enrollment


class StudentTeacherInline(admin.TabularInline):
    model = StudentTeacher
    extra = 0
    raw_id_fields = ['teacher']


class EnrollmentInline(admin.TabularInline):
    model = Enrollment
    extra = 0
    raw_id_fields = ['class_offering']
    readonly_fields = ['enrollment_date']


# ===== STUDENT ADMIN =====
@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = [
        'full_name_en',
        'email',
        'phone1',
        'branch_name',
        'subscription_status',
        'expiration_date',
        'account_link',
    ]

    list_filter = [
        'subscription_status',
        'registration_flow',
        'branch',
        'payment_method',
    ]

    search_fields = [
        'full_name_en',
        'full_name_ar',
        'email',
        'phone1',
        'national_id',
    ]

    raw_id_fields = ['user', 'branch']
    inlines = [StudentTeacherInline, EnrollmentInline]

    readonly_fields = [
        'created_at',
        'updated_at',
        'signature_url',
    ]

    fieldsets = (
        ('Personal Information', {
            'fields': (
                'full_name_ar',
                'full_name_en',
                'gender',
                'email',
                'phone1',
                'phone2',
                'national_id',
            )
        }),
        ('Course Selection', {
            'fields': (
                'branch',
                'branch_name',
                'program',
                'class_type',
                'course_level',
                'courses',
                'levels',
                'timing',
            )
        }),
        ('Subscription', {
            'fields': (
                'subscription_status',
                'course_duration_months',
                'payment_method',
                'registration_date',
                'next_payment_date',
                'expiration_date',
                'registration_flow',
            )
        }),
        ('Account', {
            'fields': (
                'user',
                'signature_url',
            )
        }),
        ('Metadata', {
            'fields': (
                'created_at',
                'updated_at',
            ),
            'classes': ('collapse',)
        }),
    )

    def account_link(self, obj):
        if obj.user_id:
            url = reverse('admin:users_user_change', args=[obj.user_id])
            return format_html('<a href="{}">{}</a>', url, obj.user.email)
        return "No Account"
    account_link.short_description = 'Account'


@admin.register(StudentTeacher)
class StudentTeacherAdmin(admin.ModelAdmin):
    list_display = ['student', 'teacher', 'created_at']
    search_fields = ['student__full_name_en', 'teacher__full_name']
    raw_id_fields = ['student', 'teacher']


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ['student', 'class_offering', 'enrollment_date']
    list_filter = ['class_offering__branch']
    search_fields = ['student__full_name_en', 'class_offering__class_name']
    raw_id_fields = ['student', 'class_offering']
