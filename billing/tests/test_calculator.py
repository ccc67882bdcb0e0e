# billing/tests/test_calculator.py
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from billing.services import FeeCalculator, format_amount, to_money
from core.exceptions import RegistrationValidationError

PRICE_TABLE = {'1': Decimal('500'), '3': Decimal('1350')}
TODAY = date(2026, 1, 10)


class FeeCalculatorTest(SimpleTestCase):

    def test_new_student_three_months(self):
        details = FeeCalculator.calculate(
            duration_key='3', flow='new_student', registration_date=TODAY, price_table=PRICE_TABLE
        )

        self.assertEqual(details.total_fee, Decimal('1350.00'))
        self.assertEqual(details.discount_percentage, Decimal('10'))
        self.assertEqual(details.fee_after_discount, Decimal('1215.00'))
        self.assertEqual(details.first_payment, Decimal('607.50'))
        self.assertEqual(details.second_payment, Decimal('607.50'))
        self.assertEqual(details.amount_remaining, Decimal('1215.00'))

    def test_dates(self):
        details = FeeCalculator.calculate(
            duration_key='3', flow='new_student', registration_date=TODAY, price_table=PRICE_TABLE
        )

        self.assertEqual(details.course_start_date, date(2026, 1, 11))
        self.assertEqual(details.payment_deadline, date(2026, 2, 9))
        self.assertEqual(details.expiration_date, date(2026, 4, 10))

    def test_custom_duration_uses_flat_rate(self):
        details = FeeCalculator.calculate(
            duration_key='3', custom_duration=4, flow='admin_entry',
            registration_date=TODAY, price_table=PRICE_TABLE
        )

        self.assertEqual(details.months, 4)
        self.assertEqual(details.total_fee, Decimal('2000.00'))
        self.assertEqual(details.discount_percentage, Decimal('0.00'))

    def test_unpriced_duration_uses_flat_rate(self):
        details = FeeCalculator.calculate(
            duration_key='6', flow='admin_entry', registration_date=TODAY, price_table=PRICE_TABLE
        )
        self.assertEqual(details.total_fee, Decimal('3000.00'))

    def test_admin_flow_applies_offer(self):
        offer = SimpleNamespace(discount_percentage=Decimal('20'))
        details = FeeCalculator.calculate(
            duration_key='3', flow='previous_student', registration_date=TODAY,
            price_table=PRICE_TABLE, offer=offer, amount_paid='300'
        )

        self.assertEqual(details.fee_after_discount, Decimal('1080.00'))
        self.assertEqual(details.amount_paid, Decimal('300.00'))
        self.assertEqual(details.amount_remaining, Decimal('780.00'))
        self.assertEqual(details.first_payment, Decimal('300.00'))
        self.assertEqual(details.second_payment, Decimal('780.00'))

    def test_new_student_ignores_offer(self):
        offer = SimpleNamespace(discount_percentage=Decimal('50'))
        details = FeeCalculator.calculate(
            duration_key='1', flow='new_student', registration_date=TODAY,
            price_table=PRICE_TABLE, offer=offer
        )
        self.assertEqual(details.fee_after_discount, Decimal('450.00'))

    def test_overpayment_clamps_remaining(self):
        details = FeeCalculator.calculate(
            duration_key='1', flow='admin_entry', registration_date=TODAY,
            price_table=PRICE_TABLE, amount_paid='800'
        )

        self.assertEqual(details.amount_remaining, Decimal('0.00'))
        self.assertEqual(details.second_payment, Decimal('0.00'))

    def test_odd_cent_split_rounds_first_half_up(self):
        first, second = FeeCalculator.schedule(Decimal('100.01'), Decimal('0'))
        self.assertEqual((first, second), (Decimal('50.01'), Decimal('50.00')))

    def test_invariants_hold_across_inputs(self):
        for total in (Decimal('0'), Decimal('99.99'), Decimal('1350')):
            for discount in (Decimal('0'), Decimal('12.5'), Decimal('100')):
                for paid in (Decimal('0'), Decimal('50'), Decimal('5000')):
                    after = FeeCalculator.apply_discount(total, discount)
                    expected = to_money(total * (1 - discount / 100))
                    self.assertEqual(after, expected)
                    self.assertGreaterEqual(max(Decimal('0'), after - paid), 0)

    def test_negative_payment_rejected(self):
        with self.assertRaises(RegistrationValidationError):
            FeeCalculator.calculate(
                duration_key='1', flow='admin_entry', registration_date=TODAY,
                price_table=PRICE_TABLE, amount_paid='-1'
            )

    def test_missing_duration_rejected(self):
        with self.assertRaises(RegistrationValidationError):
            FeeCalculator.calculate(duration_key=None, flow='new_student', registration_date=TODAY)

    def test_offer_out_of_range_rejected(self):
        with self.assertRaises(RegistrationValidationError):
            FeeCalculator.discount_for('admin_entry', SimpleNamespace(discount_percentage=Decimal('120')))

    def test_to_dict_formats_money_once(self):
        details = FeeCalculator.calculate(
            duration_key='3', flow='new_student', registration_date=TODAY, price_table=PRICE_TABLE
        )
        data = details.to_dict()

        self.assertEqual(data['fee_after_discount'], '1215.00')
        self.assertEqual(data['formatted']['fee_after_discount'], '1,215.00')
        self.assertEqual(data['payment_deadline'], '2026-02-09')


class MoneyFormattingTest(SimpleTestCase):

    def test_half_up_not_bankers(self):
        self.assertEqual(format_amount('2.345'), '2.35')
        self.assertEqual(format_amount('2.325'), '2.33')

    def test_thousands_separator(self):
        self.assertEqual(format_amount(1215), '1,215.00')

    def test_garbage_amount(self):
        with self.assertRaises(RegistrationValidationError):
            to_money('abc')
