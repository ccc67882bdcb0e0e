# students/tests/test_renewal.py
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from billing.models import BillingRecord, Offer
from core.exceptions import RegistrationValidationError
from core.models import ConfigurationItem
from students.models import Student
from students.services import RenewalService
from users.models import UserRole

User = get_user_model()


class RenewalTestMixin:

    def setUp(self):
        ConfigurationItem.objects.create(
            config_type='course_duration', config_key='3', config_value='3 Months', price=Decimal('1350')
        )
        self.user = User.objects.create_user(email='omar@example.com', password='password123')
        self.student = Student.objects.create(
            user=self.user,
            full_name_ar='عمر خالد',
            full_name_en='Omar Khaled',
            phone1='+966500000002',
            email='omar@example.com',
            national_id='1234567892',
            course_level='Level 1',
            timing='9am',
            course_duration_months=3,
            registration_date=date(2025, 10, 1),
            expiration_date=date(2025, 12, 30),
            subscription_status='expired',
        )


class RenewalServiceTest(RenewalTestMixin, TestCase):

    def renew(self, **overrides):
        kwargs = dict(
            levels=['Level 5', 'Level 6'],
            timings=['9am', '5pm'],
            duration_key='3',
            amount_paid='500',
            registration_date=date(2026, 3, 1),
        )
        kwargs.update(overrides)
        return RenewalService.renew(self.student, **kwargs)

    def test_renewal_restarts_membership(self):
        student, record, details = self.renew()
        student.refresh_from_db()

        self.assertEqual(student.subscription_status, 'active')
        self.assertEqual(student.registration_date, date(2026, 3, 1))
        self.assertEqual(student.expiration_date, date(2026, 5, 30))
        self.assertEqual(student.next_payment_date, date(2026, 3, 31))
        self.assertEqual(student.course_level, 'Level 5, Level 6')
        self.assertEqual(student.levels, ['Level 5', 'Level 6'])
        self.assertEqual(student.timing, '9am, 5pm')
        self.assertEqual(student.course_duration_months, 3)

        self.assertEqual(record.course_package, 'Level 5, Level 6')
        self.assertEqual(record.time_slot, '9am, 5pm')
        self.assertEqual(record.level_count, 3)
        self.assertEqual(record.course_start_date, date(2026, 3, 1))
        self.assertEqual(record.total_fee, Decimal('1350.00'))
        self.assertEqual(record.discount_percentage, Decimal('0'))
        self.assertEqual(record.fee_after_discount, Decimal('1350.00'))
        self.assertEqual(record.first_payment, Decimal('500.00'))
        self.assertEqual(record.second_payment, Decimal('850.00'))
        self.assertEqual(record.amount_remaining, Decimal('850.00'))
        self.assertEqual(record.payment_status, 'partial')

    def test_offers_do_not_apply(self):
        Offer.objects.create(offer_name='Spring', discount_percentage=40,
                             start_date=date(2026, 1, 1), end_date=date(2026, 12, 31))
        _, record, _ = self.renew()

        self.assertEqual(record.fee_after_discount, Decimal('1350.00'))

    def test_nothing_paid_leaves_whole_fee_as_second_payment(self):
        _, record, _ = self.renew(amount_paid=0)

        self.assertEqual(record.first_payment, Decimal('0.00'))
        self.assertEqual(record.second_payment, Decimal('1350.00'))

    def test_active_membership_cannot_renew(self):
        Student.objects.filter(pk=self.student.pk).update(
            subscription_status='active', expiration_date=date(2026, 6, 1)
        )
        self.student.refresh_from_db()

        with self.assertRaises(RegistrationValidationError):
            self.renew()
        self.assertFalse(BillingRecord.objects.exists())

    def test_lapsed_but_not_yet_marked_expired_can_renew(self):
        Student.objects.filter(pk=self.student.pk).update(subscription_status='active')
        self.student.refresh_from_db()

        student, _, _ = self.renew()
        self.assertEqual(student.expiration_date, date(2026, 5, 30))

    def test_selections_are_required(self):
        with self.assertRaises(RegistrationValidationError) as ctx:
            self.renew(levels=[], timings='', duration_key='7')

        for name in ('levels', 'timings', 'course_duration'):
            self.assertIn(name, ctx.exception.details)
        self.student.refresh_from_db()
        self.assertEqual(self.student.subscription_status, 'expired')

    def test_membership_summary(self):
        summary = RenewalService.membership(self.student, today=date(2026, 1, 5))

        self.assertEqual(summary['subscription_status'], 'expired')
        self.assertEqual(summary['days_remaining'], 0)
        self.assertTrue(summary['can_renew'])


class RenewalViewsTest(RenewalTestMixin, TestCase):

    BODY = {'levels': ['Level 5'], 'timings': ['9am'], 'courseDuration': '3', 'amountPaid': 1350}

    def setUp(self):
        super().setUp()
        self.client = Client()

    def post_renewal(self, body=None):
        return self.client.post(
            reverse('students:renew_membership'), body or self.BODY, content_type='application/json'
        )

    def test_anonymous_is_rejected(self):
        self.assertEqual(self.post_renewal().status_code, 401)

    def test_student_renews_own_membership(self):
        self.client.force_login(self.user)

        status = self.client.get(reverse('students:membership')).json()
        self.assertTrue(status['can_renew'])

        response = self.post_renewal()
        self.assertEqual(response.status_code, 201, response.content)
        data = response.json()
        self.assertEqual(data['billing']['amount_remaining'], '0.00')
        self.assertEqual(BillingRecord.objects.get(pk=data['billing_id']).payment_status, 'paid')

        self.student.refresh_from_db()
        self.assertEqual(self.student.subscription_status, 'active')

    def test_invalid_renewal_is_json_error(self):
        self.client.force_login(self.user)
        response = self.post_renewal({'levels': [], 'timings': [], 'courseDuration': ''})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')

    def test_students_cannot_renew_for_others(self):
        other = User.objects.create_user(email='other@example.com', password='password123')
        self.client.force_login(other)

        response = self.post_renewal(dict(self.BODY, studentId=self.student.id))
        self.assertEqual(response.status_code, 403)

        self.assertEqual(self.client.get(reverse('students:membership')).status_code, 404)

    def test_admin_renews_for_student(self):
        admin = User.objects.create_user(email='admin@example.com', password='adminpass123')
        UserRole.objects.create(user=admin, role='admin')
        self.client.force_login(admin)

        response = self.post_renewal(dict(self.BODY, studentId=self.student.id))
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.json()['student_id'], self.student.id)
