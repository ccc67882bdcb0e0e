# users/tests/test_services.py
from datetime import date

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from core.exceptions import AdminSetupError, AuthenticationError
from students.models import Student, StudentTeacher
from users.models import Teacher, TeacherCourseRule, UserRole
from users.services import AccountService, AdminBootstrapService, TeacherAssignmentRules

User = get_user_model()


class TeacherAssignmentRulesTest(TestCase):
    """Course -> teacher matching with the default institute rules."""

    def setUp(self):
        self.leo = Teacher.objects.create(full_name='Leo Martin')
        self.lilly = Teacher.objects.create(full_name='Lilly Stone')
        self.dorian = Teacher.objects.create(full_name='Dorian Gray')
        self.aysha = Teacher.objects.create(full_name='Aysha Khan')
        TeacherAssignmentRules.seed_default_rules()

    def test_seed_is_repeatable(self):
        TeacherAssignmentRules.seed_default_rules()
        self.assertEqual(TeacherCourseRule.objects.count(), 4)

    def test_number_ranges(self):
        self.assertEqual(TeacherAssignmentRules.candidates_for_course('English 3'), [self.leo.id])
        self.assertEqual(TeacherAssignmentRules.candidates_for_course('Level 7'), [self.lilly.id])

    def test_keywords(self):
        self.assertEqual(TeacherAssignmentRules.candidates_for_course('Spanish'), [self.lilly.id])
        self.assertEqual(TeacherAssignmentRules.candidates_for_course('French basics'), [self.dorian.id])
        self.assertEqual(TeacherAssignmentRules.candidates_for_course('Speaking club'), [self.aysha.id])

    def test_overlapping_range_matches_both_teachers(self):
        candidates = TeacherAssignmentRules.candidates_for_course('English 11')
        self.assertEqual(candidates, [self.dorian.id, self.aysha.id])

        assigned = TeacherAssignmentRules.assign(['English 11'])
        self.assertEqual(assigned, {self.dorian.id, self.aysha.id})

    def test_explicit_pick_wins(self):
        assigned = TeacherAssignmentRules.assign(['English 11'], {'English 11': self.aysha.id})
        self.assertEqual(assigned, {self.aysha.id})

    def test_assignment_is_a_set(self):
        first = TeacherAssignmentRules.assign(['English 1', 'English 2', 'Italian'])
        second = TeacherAssignmentRules.assign(['English 1', 'English 2', 'Italian'])

        self.assertEqual(first, {self.leo.id, self.lilly.id})
        self.assertEqual(first, second)

    def test_unmatched_course(self):
        self.assertEqual(TeacherAssignmentRules.assign(['Drawing']), set())

    def test_link_student_is_idempotent(self):
        student = Student.objects.create(
            full_name_ar='سارة', full_name_en='Sara', phone1='+966500000000',
            email='sara@example.com', national_id='1234567890', registration_date=date(2026, 1, 1)
        )
        TeacherAssignmentRules.link_student(student, ['English 2'])
        TeacherAssignmentRules.link_student(student, ['English 2'])

        self.assertEqual(
            list(StudentTeacher.objects.filter(student=student).values_list('teacher_id', flat=True)),
            [self.leo.id]
        )

    def test_rule_validation(self):
        with self.assertRaises(ValidationError):
            TeacherCourseRule.objects.create(teacher=self.leo, min_number=5, max_number=2)
        with self.assertRaises(ValidationError):
            TeacherCourseRule.objects.create(teacher=self.leo)


class AccountServiceTest(TestCase):

    def test_email_taken_checks_students_only(self):
        self.assertFalse(AccountService.email_taken('new@example.com'))

        User.objects.create_user(email='user@example.com', password='secret123')
        self.assertFalse(AccountService.email_taken('USER@example.com'))

        Student.objects.create(
            full_name_ar='علي', full_name_en='Ali', phone1='+966500000001',
            email='student@example.com', national_id='1234567891', registration_date=date(2026, 1, 1)
        )
        self.assertTrue(AccountService.email_taken(' student@example.com '))

    def test_orphan_student_account_is_reusable(self):
        orphan = User.objects.create_user(email='orphan@example.com', password='oldpass123')
        UserRole.objects.create(user=orphan, role='student')

        self.assertEqual(AccountService.reusable_account('ORPHAN@example.com'), orphan)
        self.assertFalse(AccountService.email_unavailable('orphan@example.com'))

        from django.contrib.auth.hashers import make_password
        user = AccountService.create_account('orphan@example.com', make_password('newpass123'))

        self.assertEqual(user.id, orphan.id)
        self.assertEqual(User.objects.count(), 1)
        self.assertTrue(user.check_password('newpass123'))

    def test_staff_and_teacher_accounts_are_not_reusable(self):
        admin = User.objects.create_user(email='admin@example.com', password='secret123')
        UserRole.objects.create(user=admin, role='admin')
        teacher_user = User.objects.create_user(email='leo@example.com', password='secret123')
        Teacher.objects.create(full_name='Leo', user=teacher_user)
        staff = User.objects.create_user(email='staff@example.com', password='secret123', is_staff=True)

        for user in (admin, teacher_user, staff):
            self.assertIsNone(AccountService.reusable_account(user.email))
            self.assertTrue(AccountService.email_unavailable(user.email))

    def test_account_with_student_row_is_not_reusable(self):
        user = User.objects.create_user(email='ali@example.com', password='secret123')
        Student.objects.create(
            user=user, full_name_ar='علي', full_name_en='Ali', phone1='+966500000001',
            email='ali@example.com', national_id='1234567891', registration_date=date(2026, 1, 1)
        )

        self.assertIsNone(AccountService.reusable_account('ali@example.com'))
        self.assertTrue(AccountService.email_unavailable('ali@example.com'))

    def test_create_account_keeps_the_hash(self):
        from django.contrib.auth.hashers import make_password

        user = AccountService.create_account('a@example.com', make_password('password123'), full_name_en='A')
        self.assertTrue(user.check_password('password123'))
        self.assertEqual(user.full_name_en, 'A')

    def test_assign_role_once(self):
        user = User.objects.create_user(email='r@example.com', password='secret123')
        AccountService.assign_role(user, 'student')
        AccountService.assign_role(user, 'student')

        self.assertEqual(user.roles, ['student'])


class AdminBootstrapServiceTest(TestCase):

    def test_bootstrap_creates_admin(self):
        user = AdminBootstrapService.bootstrap('admin@example.com', 'adminpass123')

        self.assertTrue(user.is_staff)
        self.assertTrue(UserRole.objects.filter(user=user, role='admin').exists())

    def test_second_bootstrap_is_rejected(self):
        AdminBootstrapService.bootstrap('admin@example.com', 'adminpass123')
        with self.assertRaises(AdminSetupError):
            AdminBootstrapService.bootstrap('other@example.com', 'adminpass123')

    def test_missing_credentials(self):
        with self.assertRaises(AdminSetupError):
            AdminBootstrapService.bootstrap('', '')

    def test_secret_required_when_configured(self):
        with self.settings(SETUP_ADMIN_SECRET='s3cret'):
            with self.assertRaises(AuthenticationError):
                AdminBootstrapService.bootstrap('admin@example.com', 'adminpass123', secret='wrong')

            user = AdminBootstrapService.bootstrap('admin@example.com', 'adminpass123', secret='s3cret')
            self.assertEqual(user.email, 'admin@example.com')
