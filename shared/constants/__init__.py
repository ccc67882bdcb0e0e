# shared/constants/__init__.py
from .model_fields import (
    REGISTRATION_SESSION_KEY,
    REGISTRATION_STEP_KEY,
    REGISTRATION_FLOW_KEY,
    SIGNATURES_BUCKET,
    BILLING_PDFS_BUCKET,
    AUTO_TRANSLATION_SETTING,
    FORM_TO_MODEL,
    StatusChoices,
    PaymentMethods,
    ConfigTypes,
    Roles,
    RegistrationFlows,
    PaymentStatus,
)

__all__ = [
    'REGISTRATION_SESSION_KEY',
    'REGISTRATION_STEP_KEY',
    'REGISTRATION_FLOW_KEY',
    'SIGNATURES_BUCKET',
    'BILLING_PDFS_BUCKET',
    'AUTO_TRANSLATION_SETTING',
    'FORM_TO_MODEL',
    'StatusChoices',
    'PaymentMethods',
    'ConfigTypes',
    'Roles',
    'RegistrationFlows',
    'PaymentStatus',
]
