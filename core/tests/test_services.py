# core/tests/test_services.py
from decimal import Decimal
from types import SimpleNamespace

from django.test import TestCase, SimpleTestCase

from billing.models import CoursePricing
from core.models import ConfigurationItem, Branch, ClassOffering
from core.services import (
    ConfigurationService,
    BranchEligibilityService,
    TimingAvailabilityResolver,
    normalize_text,
    level_key,
)


def make_class(timing, levels=None, courses=None, program='', start_date=None):
    return SimpleNamespace(
        timing=timing,
        levels=levels or [],
        courses=courses or [],
        program=program,
        start_date=start_date,
    )


class NormalizationTest(SimpleTestCase):

    def test_normalize_text_casefolds_and_strips_diacritics(self):
        self.assertEqual(normalize_text('  Arabic '), 'arabic')
        self.assertEqual(normalize_text('عَرَبِي'), 'عربي')
        self.assertEqual(normalize_text('عـــربي'), 'عربي')

    def test_level_key(self):
        self.assertEqual(level_key('Level 5 (1A)'), 'level-5')
        self.assertEqual(level_key('level-01'), 'level-1')
        self.assertEqual(level_key('LEVEL_3'), 'level-3')
        self.assertIsNone(level_key('Beginner'))


class TimingAvailabilityResolverTest(SimpleTestCase):

    def setUp(self):
        self.classes = [
            make_class('9am', levels=['level-1']),
            make_class('5pm', courses=['Arabic']),
        ]

    def test_levels_only(self):
        timings = TimingAvailabilityResolver.allowed_timings(self.classes, ['level-1'], [])
        self.assertEqual(timings, ['9am'])

    def test_courses_case_insensitive(self):
        timings = TimingAvailabilityResolver.allowed_timings(self.classes, [], ['arabic'])
        self.assertEqual(timings, ['5pm'])

    def test_levels_or_courses(self):
        timings = TimingAvailabilityResolver.allowed_timings(self.classes, ['level-1'], ['arabic'])
        self.assertEqual(timings, ['9am', '5pm'])

    def test_level_spelling_variants_match(self):
        timings = TimingAvailabilityResolver.allowed_timings(self.classes, ['Level 1'], [])
        self.assertEqual(timings, ['9am'])

    def test_empty_selection_returns_every_timing(self):
        timings = TimingAvailabilityResolver.allowed_timings(self.classes, [], [])
        self.assertEqual(timings, ['9am', '5pm'])

    def test_no_intersection_returns_nothing(self):
        timings = TimingAvailabilityResolver.allowed_timings(self.classes, ['level-9'], ['french'])
        self.assertEqual(timings, [])

    def test_results_are_deduplicated(self):
        classes = self.classes + [make_class('9am', levels=['Level 1'])]
        timings = TimingAvailabilityResolver.allowed_timings(classes, ['level-1'], [])
        self.assertEqual(timings, ['9am'])

    def test_prune_drops_unavailable_timings(self):
        kept = TimingAvailabilityResolver.prune(['9am', '5pm'], ['5pm'])
        self.assertEqual(kept, ['5pm'])


class BranchEligibilityTest(SimpleTestCase):

    def test_null_branch_is_unrestricted(self):
        eligibility = BranchEligibilityService.from_classes(None, [make_class('9am', levels=['level-1'])])

        self.assertFalse(eligibility.is_restricted)
        self.assertEqual(eligibility.allowed_timings, [])
        self.assertTrue(eligibility.is_allowed('timing', 'anything'))

    def test_branch_unions_class_values(self):
        classes = [
            make_class('9am', levels=['Level 1'], courses=['English'], program='General'),
            make_class('5pm', levels=['Level 2'], courses=['English', 'Arabic'], program='General'),
        ]
        eligibility = BranchEligibilityService.from_classes(4, classes)

        self.assertTrue(eligibility.is_restricted)
        self.assertEqual(eligibility.allowed_timings, ['9am', '5pm'])
        self.assertEqual(eligibility.allowed_courses, ['English', 'Arabic'])
        self.assertEqual(eligibility.allowed_level_keys, ['level-1', 'level-2'])
        self.assertEqual(eligibility.allowed_programs, ['General'])

    def test_is_allowed_matches_case_and_level_spelling(self):
        eligibility = BranchEligibilityService.from_classes(
            4, [make_class('9am', levels=['Level 1'], courses=['English'])]
        )

        self.assertTrue(eligibility.is_allowed('course', 'english'))
        self.assertTrue(eligibility.is_allowed('level', 'level-1'))
        self.assertFalse(eligibility.is_allowed('level', 'level-2'))
        self.assertFalse(eligibility.is_allowed('timing', '5pm'))

    def test_branch_without_classes_is_restricted_but_empty(self):
        eligibility = BranchEligibilityService.from_classes(4, [])

        self.assertTrue(eligibility.is_restricted)
        self.assertFalse(eligibility.is_allowed('timing', '9am'))

    def test_unknown_kind_raises(self):
        eligibility = BranchEligibilityService.from_classes(4, [])
        with self.assertRaises(ValueError):
            eligibility.is_allowed('teacher', 'Leo')


class ConfigurationServiceTest(TestCase):

    def test_load_orders_by_display_order_then_insertion(self):
        ConfigurationItem.objects.create(config_type='timing', config_key='c', config_value='C', display_order=2)
        ConfigurationItem.objects.create(config_type='timing', config_key='a', config_value='A', display_order=1)
        ConfigurationItem.objects.create(config_type='timing', config_key='b', config_value='B', display_order=1)
        ConfigurationItem.objects.create(
            config_type='timing', config_key='off', config_value='Off', display_order=0, is_active=False
        )

        labels = [o.label for o in ConfigurationService.load('timing')]
        self.assertEqual(labels, ['A', 'B', 'C'])

    def test_grouped_uses_group_names(self):
        ConfigurationItem.objects.create(config_type='payment_method', config_key='cash', config_value='Cash')
        groups = ConfigurationService.grouped()

        self.assertEqual([o.label for o in groups['payment_methods']], ['Cash'])
        self.assertEqual(groups['courses'], [])

    def test_setting_enabled(self):
        self.assertFalse(ConfigurationService.setting_enabled('auto_translation_enabled'))
        ConfigurationItem.objects.create(
            config_type='setting', config_key='auto_translation_enabled', config_value='True'
        )
        self.assertTrue(ConfigurationService.setting_enabled('auto_translation_enabled'))

    def test_deactivate_is_a_soft_delete(self):
        item = ConfigurationItem.objects.create(config_type='timing', config_key='x', config_value='X')
        ConfigurationService.deactivate(item)

        self.assertTrue(ConfigurationItem.objects.filter(pk=item.pk).exists())
        self.assertEqual(ConfigurationService.load('timing'), [])

    def test_duration_price_table_falls_back_to_course_pricing(self):
        ConfigurationItem.objects.create(
            config_type='course_duration', config_key='1', config_value='1 Month', price=Decimal('500')
        )
        ConfigurationItem.objects.create(
            config_type='course_duration', config_key='3', config_value='3 Months'
        )
        CoursePricing.objects.create(duration_months=3, price=Decimal('1350'))

        table = ConfigurationService.duration_price_table()
        self.assertEqual(table['1'], Decimal('500'))
        self.assertEqual(table['3'], Decimal('1350'))


class BranchQueriesTest(TestCase):

    def setUp(self):
        self.branch = Branch.objects.create(name_en='Riyadh', name_ar='الرياض')
        self.other = Branch.objects.create(name_en='Jeddah')
        ClassOffering.objects.create(branch=self.branch, class_name='A', timing='9am', levels=['level-1'])
        ClassOffering.objects.create(branch=self.branch, class_name='B', timing='5pm', courses=['Arabic'])
        ClassOffering.objects.create(
            branch=self.branch, class_name='C', timing='7pm', levels=['level-1'], status='inactive'
        )
        ClassOffering.objects.create(branch=self.other, class_name='D', timing='1pm', levels=['level-1'])

    def test_for_branch_uses_active_classes_only(self):
        eligibility = BranchEligibilityService.for_branch(self.branch.id)
        self.assertEqual(eligibility.allowed_timings, ['9am', '5pm'])

    def test_timings_for_branch(self):
        self.assertEqual(TimingAvailabilityResolver.for_branch(self.branch.id, ['level-1'], []), ['9am'])
        self.assertEqual(TimingAvailabilityResolver.for_branch(self.other.id, ['level-1'], []), ['1pm'])
