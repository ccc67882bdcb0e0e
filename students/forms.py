# students/forms.py
"""
Validation for the personal-information step of every registration flow.
"""
from django import forms
from django.core.validators import RegexValidator

from shared.utils import FieldMapper

PHONE_VALIDATOR = RegexValidator(r'^\+?[1-9]\d{1,14}$', "Invalid phone number format")


class StudentPersonalInfoForm(forms.Form):
    """Field rules shared by the signup page and the admin dialogs."""

    GENDER_CHOICES = (
        ('male', 'Male'),
        ('female', 'Female'),
    )

    full_name_ar = forms.CharField(
        min_length=2, max_length=100,
        error_messages={'min_length': "Name must be at least 2 characters", 'max_length': "Name too long"}
    )
    full_name_en = forms.CharField(
        min_length=2, max_length=100,
        error_messages={'min_length': "Name must be at least 2 characters", 'max_length': "Name too long"}
    )
    gender = forms.ChoiceField(choices=GENDER_CHOICES, required=False)
    phone1 = forms.CharField(max_length=16, validators=[PHONE_VALIDATOR])
    phone2 = forms.CharField(max_length=16, required=False, validators=[PHONE_VALIDATOR])
    email = forms.EmailField(max_length=254, error_messages={'invalid': "Invalid email address", 'max_length': "Email too long"})
    national_id = forms.CharField(
        min_length=8, max_length=20,
        error_messages={'min_length': "ID must be at least 8 characters", 'max_length': "ID too long"}
    )
    password = forms.CharField(
        min_length=8, max_length=128, strip=False,
        error_messages={'min_length': "Password must be at least 8 characters", 'max_length': "Password too long"}
    )

    def __init__(self, data=None, *args, **kwargs):
        if data is not None:
            data = FieldMapper.map_form_to_model(data, 'student')
        super().__init__(data, *args, **kwargs)

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()

    def clean_full_name_en(self):
        return ' '.join(self.cleaned_data['full_name_en'].split())

    def clean_full_name_ar(self):
        return ' '.join(self.cleaned_data['full_name_ar'].split())

    def error_details(self) -> dict:
        """{field: [messages]} for the JSON error payload."""
        return {name: [str(m) for m in messages] for name, messages in self.errors.items()}
