# core/admin.py
from django.contrib import admin

from .models import ConfigurationItem, Branch, ClassOffering


@admin.register(ConfigurationItem)
class ConfigurationItemAdmin(admin.ModelAdmin):
    list_display = ['config_type', 'config_key', 'config_value', 'display_order', 'price', 'is_active']
    list_filter = ['config_type', 'is_active']
    search_fields = ['config_key', 'config_value']
    list_editable = ['display_order', 'is_active']
    ordering = ['config_type', 'display_order', 'id']


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['name_en', 'name_ar', 'is_online']
    list_filter = ['is_online']
    search_fields = ['name_en', 'name_ar']


@admin.register(ClassOffering)
class ClassOfferingAdmin(admin.ModelAdmin):
    list_display = ['class_name', 'branch', 'timing', 'program', 'status', 'start_date', 'end_date', 'teacher']
    list_filter = ['status', 'branch', 'program']
    search_fields = ['class_name', 'timing']
    raw_id_fields = ['teacher']

    fieldsets = (
        ('Basic Information', {
            'fields': ('class_name', 'branch', 'program', 'teacher')
        }),
        ('Schedule', {
            'fields': ('timing', 'start_date', 'end_date', 'status')
        }),
        ('Eligibility', {
            'fields': ('courses', 'levels')
        }),
    )
