"""
Shared package - central access to constants and utils.
Avoids importing services to prevent circular dependencies.
"""

# Constants
from .constants import (
    FORM_TO_MODEL,
    StatusChoices,
    PaymentMethods,
    ConfigTypes,
    Roles,
    RegistrationFlows,
)

# Utilities
from .utils.field_mapping import FieldMapper

__all__ = [
    # Constants
    'FORM_TO_MODEL',
    'StatusChoices',
    'PaymentMethods',
    'ConfigTypes',
    'Roles',
    'RegistrationFlows',

    # Utilities
    'FieldMapper',
]
