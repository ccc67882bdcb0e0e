# users/services.py
"""
Account, role and teacher-assignment services.
"""
import hmac
import logging
import re
from typing import Optional, Dict, List, Iterable, Set

from django.apps import apps
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

# SHARED IMPORTS
from shared.constants import Roles
from core.exceptions import AdminSetupError, AuthenticationError, RegistrationValidationError

logger = logging.getLogger(__name__)


# ============ HELPER FUNCTIONS ============

def _get_model(model_name, app_label='users'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


# ============ ACCOUNT SERVICE ============

class AccountService:
    """Creates portal accounts and assigns roles."""

    @staticmethod
    def email_taken(email: str) -> bool:
        """True when a student record already uses this email."""
        clean = (email or '').strip()
        if not clean:
            return False

        Student = _get_model('Student', 'students')
        return Student.objects.filter(email__iexact=clean).exists()

    @staticmethod
    def reusable_account(email: str):
        """
        Account left behind by a registration that stopped before its student
        row was written: no student or teacher profile, no role but student.
        """
        clean = (email or '').strip()
        if not clean:
            return None

        user = get_user_model().objects.filter(
            email__iexact=clean,
            student_profile__isnull=True,
            teacher_profile__isnull=True,
        ).first()
        if user is None or user.is_staff or user.is_superuser:
            return None
        if user.user_roles.exclude(role=Roles.STUDENT).exists():
            return None
        return user

    @staticmethod
    def email_unavailable(email: str) -> bool:
        """Registered student, or an account registration cannot take over (staff, teachers)."""
        if AccountService.email_taken(email):
            return True
        User = get_user_model()
        return User.objects.email_exists(email) and AccountService.reusable_account(email) is None

    @staticmethod
    def create_account(email: str, password_hash: str, **profile):
        """
        Create the login identity from an already-hashed password. An orphan
        account from an earlier incomplete registration is reused.
        """
        orphan = AccountService.reusable_account(email)
        if orphan is not None:
            orphan.password = password_hash
            orphan.save(update_fields=['password'])
            logger.info(f"Reusing account {orphan.id} left by an incomplete registration")
            return orphan

        User = get_user_model()
        user = User.objects.create_user_with_hash(
            email=email,
            password_hash=password_hash,
            full_name_en=profile.get('full_name_en', ''),
            full_name_ar=profile.get('full_name_ar', ''),
            phone_number=profile.get('phone_number') or None,
        )
        logger.info(f"Account created for {user.email} (id={user.id})")
        return user

    @staticmethod
    def assign_role(user, role: str):
        if role not in dict(Roles.CHOICES):
            raise RegistrationValidationError(f"Unknown role '{role}'.")

        UserRole = _get_model('UserRole')
        user_role, created = UserRole.objects.get_or_create(user=user, role=role)
        if created:
            logger.info(f"Assigned role {role} to user {user.id}")
        return user_role

    @staticmethod
    def update_profile(user, **fields):
        """Copy registration details onto the account's profile fields."""
        allowed = {'full_name_en', 'full_name_ar', 'phone_number'}
        changed = []
        for name, value in fields.items():
            if name in allowed and value is not None and getattr(user, name) != value:
                setattr(user, name, value)
                changed.append(name)

        if changed:
            user.save(update_fields=changed)
            logger.debug(f"Profile updated for user {user.id}: {changed}")
        return user


# ============ ADMIN BOOTSTRAP ============

class AdminBootstrapService:
    """One-time creation of the first admin account."""

    @staticmethod
    def admin_exists() -> bool:
        UserRole = _get_model('UserRole')
        return UserRole.objects.filter(role=Roles.ADMIN).exists()

    @staticmethod
    def check_secret(provided: Optional[str]):
        expected = getattr(settings, 'SETUP_ADMIN_SECRET', '')
        if not expected:
            return
        if not provided or not hmac.compare_digest(str(provided), str(expected)):
            logger.warning("Admin setup attempted with an invalid secret")
            raise AuthenticationError("Invalid setup secret.", user_friendly=True)

    @staticmethod
    def bootstrap(email: str, password: str, secret: Optional[str] = None):
        """
        Create the admin identity and role. Rejected once any admin role exists.

        Raises:
            AuthenticationError: shared secret configured and not matched
            AdminSetupError: an admin already exists or credentials are missing
        """
        AdminBootstrapService.check_secret(secret)

        if not email or not password:
            raise AdminSetupError("Admin email and password are required.")

        if AdminBootstrapService.admin_exists():
            raise AdminSetupError("An admin account already exists.")

        User = get_user_model()
        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            if user is None:
                user = User.objects.create_user(email=email, password=password, is_staff=True)
            else:
                user.is_staff = True
                user.set_password(password)
                user.save(update_fields=['is_staff', 'password'])

            AccountService.assign_role(user, Roles.ADMIN)

        logger.info(f"Admin bootstrap completed for {user.email}")
        return user


# ============ TEACHER AUTO-ASSIGNMENT ============

NUMBER_PATTERN = re.compile(r'\d+')


class TeacherAssignmentRules:
    """
    Course -> teacher matching through explicit TeacherCourseRule rows.

    The overlapping 10-12 range is intentional: both Dorian and Aysha
    are assigned for those courses.
    """

    # (name token, min number, max number, keywords)
    DEFAULT_RULES = (
        ('leo', 1, 4, []),
        ('lilly', 5, 9, ['spanish', 'italian']),
        ('dorian', 10, 12, ['arabic', 'french', 'chinese']),
        ('aysha', 10, 12, ['speaking']),
    )

    @staticmethod
    def course_number(course) -> Optional[int]:
        match = NUMBER_PATTERN.search(str(course or ''))
        return int(match.group()) if match else None

    @staticmethod
    def active_rules():
        TeacherCourseRule = _get_model('TeacherCourseRule')
        return list(
            TeacherCourseRule.objects.filter(is_active=True)
            .select_related('teacher')
            .order_by('priority', 'id')
        )

    @staticmethod
    def seed_default_rules() -> List:
        """
        Resolve each default token to the first teacher whose name contains it
        (case-insensitive) and store the rule. Safe to run repeatedly.
        """
        Teacher = _get_model('Teacher')
        TeacherCourseRule = _get_model('TeacherCourseRule')

        rules = []
        for priority, (token, low, high, keywords) in enumerate(TeacherAssignmentRules.DEFAULT_RULES):
            teacher = Teacher.objects.filter(full_name__icontains=token).order_by('id').first()
            if teacher is None:
                logger.warning(f"No teacher matches '{token}'; rule skipped")
                continue

            rule, created = TeacherCourseRule.objects.get_or_create(
                teacher=teacher,
                min_number=low,
                max_number=high,
                defaults={'keywords': keywords, 'priority': priority},
            )
            if not created and rule.keywords != keywords:
                rule.keywords = keywords
                rule.save()
            rules.append(rule)

        logger.info(f"Seeded {len(rules)} teacher course rules")
        return rules

    @staticmethod
    def candidates_for_course(course, rules=None) -> List[int]:
        """Teacher ids whose rule matches the course, in rule order, no duplicates."""
        rules = TeacherAssignmentRules.active_rules() if rules is None else rules
        number = TeacherAssignmentRules.course_number(course)

        candidates = []
        for rule in rules:
            if rule.matches(number, course) and rule.teacher_id not in candidates:
                candidates.append(rule.teacher_id)
        return candidates

    @staticmethod
    def assign(courses: Iterable[str], selections: Optional[Dict[str, int]] = None, rules=None) -> Set[int]:
        """
        Teacher ids for the courses. An explicit pick for a course wins;
        otherwise every matching teacher is assigned.
        """
        rules = TeacherAssignmentRules.active_rules() if rules is None else rules
        selections = selections or {}

        assigned = set()
        for course in courses or []:
            pick = selections.get(course)
            if pick:
                assigned.add(int(pick))
                continue
            assigned.update(TeacherAssignmentRules.candidates_for_course(course, rules))
        return assigned

    @staticmethod
    def link_student(student, courses, selections=None) -> Set[int]:
        """Create StudentTeacher rows for the assigned teachers (get-or-create)."""
        StudentTeacher = _get_model('StudentTeacher', 'students')
        Teacher = _get_model('Teacher')

        teacher_ids = TeacherAssignmentRules.assign(courses, selections)
        existing = set(Teacher.objects.filter(id__in=teacher_ids).values_list('id', flat=True))

        missing = teacher_ids - existing
        if missing:
            logger.warning(f"Ignoring unknown teacher ids for student {student.id}: {sorted(missing)}")

        for teacher_id in sorted(existing):
            StudentTeacher.objects.get_or_create(student=student, teacher_id=teacher_id)

        logger.info(f"Linked student {student.id} to teachers {sorted(existing)}")
        return existing
