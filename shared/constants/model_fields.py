# shared/constants/model_fields.py

"""
CONSTANT field names and choice values shared across the institute apps.
NO DEPENDENCIES - safe to import from models, services and settings.
"""

# Registration draft keys (session-scoped storage)
REGISTRATION_SESSION_KEY = 'student_registration'
REGISTRATION_STEP_KEY = 'student_registration_step'
REGISTRATION_FLOW_KEY = 'student_registration_flow'

# Artifact buckets
SIGNATURES_BUCKET = 'signatures'
BILLING_PDFS_BUCKET = 'billing-pdfs'

# Global setting keys stored as ConfigurationItem(config_type='setting')
AUTO_TRANSLATION_SETTING = 'auto_translation_enabled'

# Form field → Model field mapping (wizard draft → Student)
FORM_TO_MODEL = {
    'fullNameAr': 'full_name_ar',
    'fullNameEn': 'full_name_en',
    'id': 'national_id',
    'nationalId': 'national_id',
    'phone': 'phone1',
    'paymentMethod': 'payment_method',
    'courseDuration': 'course_duration',
    'customDuration': 'custom_duration',
}


# Status choices (consolidated from all apps)
class StatusChoices:
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    EXPIRED = 'expired'
    COMPLETED = 'completed'
    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    FAILED = 'failed'

    SUBSCRIPTION_CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (EXPIRED, 'Expired'),
    )
    CLASS_CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (COMPLETED, 'Completed'),
    )
    OFFER_CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (EXPIRED, 'Expired'),
    )
    SUBMISSION_CHOICES = (
        (PENDING, 'Pending'),
        (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'),
        (FAILED, 'Failed'),
    )


# Payment methods
class PaymentMethods:
    CASH = 'Cash'
    CARD = 'Card'
    TRANSFER = 'Bank Transfer'

    DEFAULT = CASH


# Configuration discriminators for form_configurations rows
class ConfigTypes:
    COURSE = 'course'
    BRANCH = 'branch'
    PAYMENT_METHOD = 'payment_method'
    COURSE_DURATION = 'course_duration'
    TIMING = 'timing'
    LEVEL = 'level'
    FIELD_LABEL = 'field_label'
    PROGRAM = 'program'
    CLASS_TYPE = 'class_type'
    SETTING = 'setting'

    CHOICES = (
        (COURSE, 'Course'),
        (BRANCH, 'Branch'),
        (PAYMENT_METHOD, 'Payment Method'),
        (COURSE_DURATION, 'Course Duration'),
        (TIMING, 'Timing'),
        (LEVEL, 'Level'),
        (FIELD_LABEL, 'Field Label'),
        (PROGRAM, 'Program'),
        (CLASS_TYPE, 'Class Type'),
        (SETTING, 'Setting'),
    )


# Portal roles (user_roles.role)
class Roles:
    STUDENT = 'student'
    TEACHER = 'teacher'
    ADMIN = 'admin'

    CHOICES = (
        (STUDENT, 'Student'),
        (TEACHER, 'Teacher'),
        (ADMIN, 'Admin'),
    )


# Registration flows
class RegistrationFlows:
    NEW_STUDENT = 'new_student'
    PREVIOUS_STUDENT = 'previous_student'
    ADMIN_ENTRY = 'admin_entry'

    CHOICES = (
        (NEW_STUDENT, 'New Student Signup'),
        (PREVIOUS_STUDENT, 'Previous Student (Admin)'),
        (ADMIN_ENTRY, 'Admin Entry'),
    )


# Billing balance states (billing.payment_status)
class PaymentStatus:
    UNPAID = 'unpaid'
    PARTIAL = 'partial'
    PAID = 'paid'

    CHOICES = (
        (UNPAID, 'Unpaid'),
        (PARTIAL, 'Partially Paid'),
        (PAID, 'Paid'),
    )
