# admissions/tests/test_wizard.py
from django.test import SimpleTestCase

from admissions import wizard
from admissions.session import RegistrationSession, SUBMISSION_KEY
from admissions.wizard import Step, RegistrationDraft
from core.exceptions import RegistrationValidationError


class FakeContext:
    """Plain-value stand-in for the database lookups."""

    TIMINGS = {None: ['9am', '5pm'], 1: ['9am', '5pm'], 2: ['5pm']}
    CANDIDATES = {'English 11': [3, 4], 'English 1': [1]}

    def allowed_timings(self, draft):
        return self.TIMINGS.get(draft.branch_id, [])

    def duration_keys(self):
        return ['1', '3']

    def branch_exists(self, branch_id):
        return branch_id in (1, 2)

    def teacher_candidates(self, course):
        return self.CANDIDATES.get(course, [])


PERSONAL_INFO = {
    'fullNameAr': 'سارة أحمد',
    'fullNameEn': 'Sara Ahmed',
    'phone1': '+966500000000',
    'email': 'sara@example.com',
    'nationalId': '1234567890',
    'password': 'password123',
}


class StepTableTest(SimpleTestCase):

    def test_new_signup_order(self):
        self.assertEqual(
            [s.value for s in wizard.steps_for('new_student')],
            ['personal_info', 'course_level', 'teacher', 'timing', 'duration',
             'branch', 'payment_method', 'terms', 'billing']
        )

    def test_admin_flow_skips_teacher_and_terms(self):
        steps = wizard.steps_for('admin_entry')
        self.assertNotIn(Step.TEACHER, steps)
        self.assertNotIn(Step.TERMS, steps)
        self.assertEqual(wizard.next_step('admin_entry', Step.COURSE_LEVEL), Step.BRANCH)

    def test_edges(self):
        self.assertIsNone(wizard.previous_step('new_student', Step.PERSONAL_INFO))
        self.assertIsNone(wizard.next_step('new_student', Step.BILLING))

    def test_unknown_flow(self):
        with self.assertRaises(RegistrationValidationError):
            wizard.steps_for('walk_in')


class ReducerTest(SimpleTestCase):

    def test_apply_step_returns_new_draft(self):
        draft = RegistrationDraft()
        updated = wizard.apply_step(draft, Step.TIMING, {'timing': '9am', 'email': 'x@example.com'})

        self.assertEqual(draft.timing, '')
        self.assertEqual(updated.timing, '9am')
        self.assertEqual(updated.email, '')

    def test_clean_patch_course_level(self):
        values = wizard.clean_patch(Step.COURSE_LEVEL, {'courses': 'English 1, English 2', 'levels': ['Level 1', '']})
        self.assertEqual(values['selected_courses'], ['English 1', 'English 2'])
        self.assertEqual(values['selected_levels'], ['Level 1'])

    def test_clean_patch_duration(self):
        values = wizard.clean_patch(Step.DURATION, {'courseDuration': 3, 'customDuration': ''})
        self.assertEqual(values, {'course_duration': '3', 'custom_duration': None})

        with self.assertRaises(RegistrationValidationError):
            wizard.clean_patch(Step.DURATION, {'customDuration': 'six'})

    def test_personal_info_hashes_password(self):
        values = wizard.clean_patch(Step.PERSONAL_INFO, PERSONAL_INFO)

        self.assertNotIn('password', values)
        self.assertTrue(values['password_hash'])
        self.assertNotEqual(values['password_hash'], 'password123')

    def test_personal_info_errors(self):
        with self.assertRaises(RegistrationValidationError) as ctx:
            wizard.clean_patch(Step.PERSONAL_INFO, dict(PERSONAL_INFO, email='bad'))
        self.assertIn('email', ctx.exception.details)

    def test_draft_round_trip_drops_unknown_keys(self):
        draft = RegistrationDraft.from_dict({'timing': '9am', 'legacy': 'x'})
        self.assertEqual(draft.timing, '9am')
        self.assertNotIn('password_hash', draft.public_dict())


class StepValidationTest(SimpleTestCase):

    def setUp(self):
        self.context = FakeContext()

    def test_timing_must_be_offered(self):
        draft = RegistrationDraft(timing='7pm')
        errors = wizard.step_errors(draft, Step.TIMING, self.context)
        self.assertIn('timing', errors)

    def test_teacher_pick_required_when_several_qualify(self):
        draft = RegistrationDraft(selected_courses=['English 11', 'English 1'])
        self.assertIn('teacher_selections', wizard.step_errors(draft, Step.TEACHER, self.context))

        draft = RegistrationDraft(selected_courses=['English 11', 'English 1'], teacher_selections={'English 11': 4})
        self.assertEqual(wizard.step_errors(draft, Step.TEACHER, self.context), {})

    def test_custom_duration_must_be_positive(self):
        draft = RegistrationDraft(custom_duration=0)
        self.assertIn('custom_duration', wizard.step_errors(draft, Step.DURATION, self.context))

    def test_terms(self):
        self.assertIn('terms_accepted', wizard.step_errors(RegistrationDraft(), Step.TERMS, self.context))

    def test_validate_flow_collects_every_step(self):
        with self.assertRaises(RegistrationValidationError) as ctx:
            wizard.validate_flow(RegistrationDraft(), 'admin_entry', self.context)

        details = ctx.exception.details
        for name in ('email', 'selected_courses', 'branch_id', 'timing', 'course_duration', 'payment_method'):
            self.assertIn(name, details)
        self.assertNotIn('terms_accepted', details)


class RegistrationSessionTest(SimpleTestCase):

    def setUp(self):
        self.storage = {}
        self.session = RegistrationSession(self.storage, context=FakeContext())
        self.session.start('new_student')

    def fill_until_branch(self):
        self.session.mutate(Step.PERSONAL_INFO, PERSONAL_INFO)
        self.session.mutate(Step.COURSE_LEVEL, {'courses': ['English 1'], 'levels': ['Level 1']})
        self.session.mutate(Step.TEACHER, {})
        self.session.mutate(Step.TIMING, {'timing': '9am'})
        self.session.mutate(Step.DURATION, {'courseDuration': '3'})

    def test_start_issues_submission_key(self):
        self.assertTrue(self.storage[SUBMISSION_KEY])
        self.assertEqual(self.session.current_step, Step.PERSONAL_INFO)

    def test_steps_must_be_taken_in_order(self):
        with self.assertRaises(RegistrationValidationError):
            self.session.mutate(Step.TIMING, {'timing': '9am'})

    def test_invalid_step_leaves_draft_unchanged(self):
        self.session.mutate(Step.PERSONAL_INFO, PERSONAL_INFO)
        with self.assertRaises(RegistrationValidationError):
            self.session.mutate(Step.COURSE_LEVEL, {'courses': []})

        self.assertEqual(self.session.draft.selected_courses, [])
        self.assertEqual(self.session.current_step, Step.COURSE_LEVEL)

    def test_back_does_not_validate(self):
        self.session.mutate(Step.PERSONAL_INFO, PERSONAL_INFO)
        self.assertEqual(self.session.back(), Step.PERSONAL_INFO)
        self.assertEqual(self.session.back(), Step.PERSONAL_INFO)
        self.assertEqual(self.session.draft.email, 'sara@example.com')

    def test_branch_change_drops_unavailable_timing(self):
        self.fill_until_branch()
        self.session.mutate(Step.BRANCH, {'branchId': 2})

        self.assertEqual(self.session.draft.timing, '')
        self.assertEqual(self.session.current_step, Step.TIMING)

        self.session.mutate(Step.TIMING, {'timing': '5pm'})
        self.assertEqual(self.session.current_step, Step.DURATION)

    def test_branch_keeping_timing_moves_on(self):
        self.fill_until_branch()
        self.session.mutate(Step.BRANCH, {'branchId': 1})

        self.assertEqual(self.session.draft.timing, '9am')
        self.assertEqual(self.session.current_step, Step.PAYMENT_METHOD)

    def test_finalize_requires_billing_step(self):
        with self.assertRaises(RegistrationValidationError):
            self.session.finalize()

    def test_full_walk_then_finalize_and_discard(self):
        self.fill_until_branch()
        self.session.mutate(Step.BRANCH, {'branchId': 1})
        self.session.mutate(Step.PAYMENT_METHOD, {'paymentMethod': 'Cash'})
        self.session.mutate(Step.TERMS, {'termsAccepted': True})

        self.assertEqual(self.session.current_step, Step.BILLING)
        draft = self.session.finalize()
        self.assertEqual(draft.course_duration, '3')
        self.assertEqual(draft.branch_id, 1)

        self.session.discard()
        self.assertFalse(self.session.is_active)
        self.assertEqual(self.storage, {})

    def test_course_change_drops_stale_teacher_picks(self):
        self.session.mutate(Step.PERSONAL_INFO, PERSONAL_INFO)
        self.session.mutate(Step.COURSE_LEVEL, {'courses': ['English 11', 'English 1']})
        self.session.mutate(Step.TEACHER, {'teacherSelections': {'English 11': 4}})
        self.assertEqual(self.session.draft.teacher_selections, {'English 11': 4})

        self.session.back()
        self.session.back()
        self.session.mutate(Step.COURSE_LEVEL, {'courses': ['English 1']})

        self.assertEqual(self.session.draft.teacher_selections, {})
        self.assertEqual(self.session.current_step, Step.TEACHER)


class ColumnLimitValidationTest(SimpleTestCase):

    def setUp(self):
        self.context = FakeContext()

    def test_long_course_selection_is_accepted(self):
        courses = [f"Advanced Business English Communication Module {n}" for n in range(1, 8)]
        draft = RegistrationDraft(selected_courses=courses)

        self.assertGreater(len(', '.join(courses)), 255)
        self.assertEqual(wizard.step_errors(draft, Step.COURSE_LEVEL, self.context), {})

    def test_program_and_class_type_limits(self):
        draft = RegistrationDraft(selected_courses=['English 1'], program='P' * 256, class_type='C' * 51)
        errors = wizard.step_errors(draft, Step.COURSE_LEVEL, self.context)

        self.assertIn('program', errors)
        self.assertIn('class_type', errors)

    def test_payment_method_limit(self):
        draft = RegistrationDraft(payment_method='M' * 51)
        self.assertIn('payment_method', wizard.step_errors(draft, Step.PAYMENT_METHOD, self.context))

    def test_prune_teacher_selections_is_pure(self):
        draft = RegistrationDraft(selected_courses=['English 1'], teacher_selections={'English 1': 1, 'English 11': 4})
        pruned = wizard.prune_teacher_selections(draft)

        self.assertEqual(pruned.teacher_selections, {'English 1': 1})
        self.assertEqual(draft.teacher_selections, {'English 1': 1, 'English 11': 4})
