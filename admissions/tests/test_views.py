# admissions/tests/test_views.py
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, Client
from django.urls import reverse

from admissions.tests.test_services import SIGNATURE
from billing.models import BillingRecord
from core.models import ConfigurationItem, Branch, ClassOffering
from students.models import Student
from users.models import UserRole

User = get_user_model()


class RegistrationWizardViewsTest(TestCase):

    def setUp(self):
        cache.clear()
        self.client = Client()
        ConfigurationItem.objects.create(
            config_type='course_duration', config_key='3', config_value='3 Months', price=Decimal('1350')
        )
        self.branch = Branch.objects.create(name_en='Riyadh')
        ClassOffering.objects.create(
            branch=self.branch, class_name='English 1 AM', timing='9am',
            courses=['English 1'], levels=['Level 1'], start_date=date(2026, 2, 1)
        )

    def post(self, name, data=None, **kwargs):
        return self.client.post(
            reverse(f'admissions:{name}', kwargs=kwargs or None),
            data or {},
            content_type='application/json',
        )

    def step(self, step, data):
        response = self.post('step', data, step=step)
        self.assertEqual(response.status_code, 200, response.content)
        return response.json()

    def walk_new_signup(self):
        response = self.post('start', {'flow': 'new_student'})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['current_step'], 'personal_info')

        self.step('personal_info', {
            'fullNameAr': 'سارة أحمد',
            'fullNameEn': 'Sara Ahmed',
            'phone1': '500000000',
            'countryCode1': '+966',
            'email': 'Sara@Example.com',
            'nationalId': '1234567890',
            'password': 'password123',
        })
        self.step('course_level', {'courses': ['English 1'], 'levels': ['Level 1']})
        self.step('teacher', {})
        state = self.step('timing', {'timing': '9am'})
        self.assertEqual(state['allowed_timings'], ['9am'])
        self.step('duration', {'courseDuration': '3'})
        self.step('branch', {'branchId': self.branch.id})
        self.step('payment_method', {'paymentMethod': 'Cash'})
        return self.step('terms', {'termsAccepted': True})

    def test_full_signup(self):
        state = self.walk_new_signup()
        self.assertEqual(state['current_step'], 'billing')
        self.assertNotIn('password_hash', state['draft'])

        preview = self.client.get(reverse('admissions:billing_preview')).json()
        self.assertEqual(preview['billing']['fee_after_discount'], '1215.00')

        response = self.client.post(
            reverse('admissions:submit'), {'signature': SIGNATURE},
            content_type='application/json', HTTP_X_IDEMPOTENCY_KEY='abc-123'
        )
        self.assertEqual(response.status_code, 201, response.content)
        result = response.json()
        self.assertEqual(result['email'], 'sara@example.com')
        self.assertEqual(result['billing']['formatted']['first_payment'], '607.50')

        student = Student.objects.get(pk=result['student_id'])
        self.assertEqual(student.phone1, '+966500000000')
        self.assertEqual(student.timing, '9am')

        # Session was discarded
        self.assertEqual(self.client.get(reverse('admissions:draft')).status_code, 400)

        # Same key replays the stored result
        replay = self.client.post(
            reverse('admissions:submit'), {'signature': SIGNATURE},
            content_type='application/json', HTTP_X_IDEMPOTENCY_KEY='abc-123'
        )
        self.assertEqual(replay.status_code, 200)
        self.assertEqual(replay.json(), result)
        self.assertEqual(BillingRecord.objects.count(), 1)

    def test_submit_without_header_uses_session_key(self):
        self.walk_new_signup()

        response = self.client.post(
            reverse('admissions:submit'), {'signature': SIGNATURE}, content_type='application/json'
        )
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(User.objects.count(), 1)

    def test_submit_before_billing_step(self):
        self.post('start', {'flow': 'new_student'})
        response = self.client.post(
            reverse('admissions:submit'), {'signature': SIGNATURE}, content_type='application/json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(User.objects.count(), 0)

    def test_duplicate_email(self):
        Student.objects.create(
            full_name_ar='سارة', full_name_en='Sara', phone1='+966500000001',
            email='sara@example.com', national_id='9999999999', registration_date=date(2025, 1, 1)
        )
        self.walk_new_signup()

        response = self.client.post(
            reverse('admissions:submit'), {'signature': SIGNATURE}, content_type='application/json'
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'DUPLICATE_EMAIL')
        self.assertEqual(User.objects.count(), 0)

    def test_step_errors_are_json(self):
        self.post('start', {'flow': 'new_student'})
        response = self.post('step', {'email': 'bad'}, step='personal_info')

        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertEqual(data['code'], 'VALIDATION_ERROR')
        self.assertIn('email', data['details'])

    def test_unknown_step(self):
        self.post('start', {'flow': 'new_student'})
        self.assertEqual(self.post('step', {}, step='payment').status_code, 400)

    def test_back_and_discard(self):
        self.walk_new_signup()

        state = self.post('back').json()
        self.assertEqual(state['current_step'], 'terms')

        self.post('discard')
        self.assertEqual(self.client.get(reverse('admissions:draft')).status_code, 400)

    def test_admin_flow_requires_admin(self):
        response = self.post('start', {'flow': 'admin_entry'})
        self.assertEqual(response.status_code, 403)

        admin = User.objects.create_user(email='admin@example.com', password='adminpass123')
        UserRole.objects.create(user=admin, role='admin')
        self.client.force_login(admin)

        response = self.post('start', {'flow': 'admin_entry'})
        self.assertEqual(response.status_code, 201)
        self.assertNotIn('teacher', response.json()['steps'])
