# billing/tests/test_views.py
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from billing.services import BillingService, FeeCalculator
from students.models import Student
from users.models import UserRole

User = get_user_model()


class BillingViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = User.objects.create_user(email='admin@example.com', password='adminpass123')
        UserRole.objects.create(user=self.admin, role='admin')

        self.owner = User.objects.create_user(email='sara@example.com', password='studentpass1')
        self.other = User.objects.create_user(email='other@example.com', password='studentpass2')

        self.student = Student.objects.create(
            user=self.owner,
            full_name_ar='سارة',
            full_name_en='Sara',
            phone1='+966500000000',
            email='sara@example.com',
            national_id='1234567890',
            registration_date=date(2026, 1, 10),
        )
        details = FeeCalculator.calculate(
            duration_key='3', flow='admin_entry', registration_date=date(2026, 1, 10),
            price_table={'3': Decimal('1350')},
        )
        self.record = BillingService.create_billing_record(self.student, details)
        self.detail_url = reverse('billing:billing_detail', kwargs={'billing_id': self.record.id})
        self.payment_url = reverse('billing:record_payment', kwargs={'billing_id': self.record.id})

    def test_detail_requires_login(self):
        self.assertEqual(self.client.get(self.detail_url).status_code, 401)

    def test_owner_can_view(self):
        self.client.force_login(self.owner)
        response = self.client.get(self.detail_url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['amount_remaining'], '1350.00')

    def test_other_student_is_denied(self):
        self.client.force_login(self.other)
        response = self.client.get(self.detail_url)

        self.assertEqual(response.status_code, 403)

    def test_admin_records_payment(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            self.payment_url, {'amount': '1350', 'payment_method': 'Cash'},
            content_type='application/json'
        )

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['message'], "Payment completed! Full amount paid.")
        self.assertEqual(data['billing']['payment_status'], 'paid')
        self.assertEqual(len(data['billing']['payments']), 1)

    def test_overpayment_is_rejected(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            self.payment_url, {'amount': '2000', 'paymentMethod': 'Cash'},
            content_type='application/json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'PAYMENT_ERROR')

    def test_student_cannot_record_payment(self):
        self.client.force_login(self.owner)
        response = self.client.post(
            self.payment_url, {'amount': '10', 'payment_method': 'Cash'},
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 403)
