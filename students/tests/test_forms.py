# students/tests/test_forms.py
from django.test import SimpleTestCase

from students.forms import StudentPersonalInfoForm


class StudentPersonalInfoFormTest(SimpleTestCase):

    def valid_data(self, **overrides):
        data = {
            'fullNameAr': 'محمد  علي',
            'fullNameEn': 'Mohammed   Ali',
            'phone1': '512 345 678',
            'countryCode1': '+966',
            'email': ' Mohammed@Example.COM ',
            'nationalId': '1234567890',
            'password': 'password123',
        }
        data.update(overrides)
        return data

    def test_camel_case_payload_is_mapped_and_cleaned(self):
        form = StudentPersonalInfoForm(self.valid_data())

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['email'], 'mohammed@example.com')
        self.assertEqual(form.cleaned_data['full_name_en'], 'Mohammed Ali')
        self.assertEqual(form.cleaned_data['full_name_ar'], 'محمد علي')
        self.assertEqual(form.cleaned_data['phone1'], '+966512345678')
        self.assertEqual(form.cleaned_data['national_id'], '1234567890')

    def test_error_details(self):
        form = StudentPersonalInfoForm(self.valid_data(email='not-an-email', password='short', fullNameEn='A'))

        self.assertFalse(form.is_valid())
        details = form.error_details()
        self.assertEqual(details['email'], ["Invalid email address"])
        self.assertEqual(details['password'], ["Password must be at least 8 characters"])
        self.assertEqual(details['full_name_en'], ["Name must be at least 2 characters"])

    def test_bad_phone(self):
        form = StudentPersonalInfoForm(self.valid_data(phone1='0000', countryCode1=''))

        self.assertFalse(form.is_valid())
        self.assertIn('phone1', form.errors)

    def test_gender_and_second_phone_are_optional(self):
        form = StudentPersonalInfoForm(self.valid_data(gender='female', phone2=''))

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['gender'], 'female')
        self.assertEqual(form.cleaned_data['phone2'], '')
