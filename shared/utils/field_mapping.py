# shared/utils/field_mapping.py
"""
Consistent field mapping between the portal payloads and the models.
DEPENDS ONLY ON: shared.constants
"""
from shared.constants.model_fields import FORM_TO_MODEL

import logging

logger = logging.getLogger(__name__)


class FieldMapper:
    """Handle field name standardization and mapping."""

    # Per-target overrides on top of FORM_TO_MODEL
    MAPS = {
        'draft': {
            'courses': 'selected_courses',
            'levels': 'selected_levels',
            'teacherSelections': 'teacher_selections',
            'branchId': 'branch_id',
            'branch': 'branch_id',
            'timings': 'timing',
            'amountPaid': 'amount_paid',
            'programName': 'program',
            'classType': 'class_type',
            'termsAccepted': 'terms_accepted',
            'countryCode1': 'country_code1',
            'countryCode2': 'country_code2',
        },
        'renewal': {
            'studentId': 'student_id',
            'amountPaid': 'amount_paid',
            'selectedLevels': 'levels',
            'selectedTimings': 'timings',
        },
        'student': {
            'fullNameAr': 'full_name_ar',
            'fullNameEn': 'full_name_en',
            'countryCode1': 'country_code1',
            'countryCode2': 'country_code2',
        },
    }

    @staticmethod
    def map_form_to_model(form_data, model_name=None):
        """
        Apply consistent field mapping from portal payloads to model/draft fields.
        """
        if not form_data:
            return {}

        mapping = dict(FORM_TO_MODEL)
        mapping.update(FieldMapper.MAPS.get(model_name, {}))

        standardized_data = {}
        for key, value in form_data.items():
            standardized_data[mapping.get(key, key)] = value

        for phone_field, code_field in (('phone1', 'country_code1'), ('phone2', 'country_code2')):
            if phone_field in standardized_data:
                standardized_data[phone_field] = FieldMapper.standardize_phone_number(
                    standardized_data[phone_field],
                    standardized_data.pop(code_field, None),
                )
            else:
                standardized_data.pop(code_field, None)

        return standardized_data

    @staticmethod
    def standardize_phone_number(phone, country_code=None):
        """
        Strip separators and prefix the dialing code when the number has none.

        "+966 512 345 678" -> "+966512345678"
        ("512345678", "+966") -> "+966512345678"
        """
        if not phone:
            return ""

        cleaned = ''.join(ch for ch in str(phone).strip() if ch.isdigit() or ch == '+')
        if not cleaned:
            return ""

        if country_code and not cleaned.startswith('+'):
            code = ''.join(ch for ch in str(country_code) if ch.isdigit())
            cleaned = f"+{code}{cleaned.lstrip('0')}"

        return cleaned
