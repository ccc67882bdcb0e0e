# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User, UserRole, Teacher, TeacherCourseRule


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    """Email-login user admin with the profile fields."""
    list_display = ('email', 'full_name_en', 'full_name_ar', 'phone_number', 'is_staff', 'is_active')
    list_filter = ('is_staff', 'is_active', 'is_superuser', 'user_roles__role')
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Profile'), {'fields': ('full_name_en', 'full_name_ar', 'phone_number')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'full_name_en', 'is_staff', 'is_active')}
        ),
    )
    search_fields = ('email', 'full_name_en', 'full_name_ar', 'phone_number')
    ordering = ('email',)
    filter_horizontal = ('groups', 'user_permissions',)
    inlines = [UserRoleInline]


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ['user', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['user__email']
    raw_id_fields = ['user']


class TeacherCourseRuleInline(admin.TabularInline):
    model = TeacherCourseRule
    extra = 0


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone', 'user']
    search_fields = ['full_name', 'email']
    raw_id_fields = ['user']
    inlines = [TeacherCourseRuleInline]


@admin.register(TeacherCourseRule)
class TeacherCourseRuleAdmin(admin.ModelAdmin):
    list_display = ['teacher', 'min_number', 'max_number', 'keywords', 'priority', 'is_active']
    list_filter = ['is_active']
    list_editable = ['priority', 'is_active']
