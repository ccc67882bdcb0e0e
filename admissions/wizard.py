# admissions/wizard.py
"""
Registration wizard: steps, flows, the draft schema and the step reducer.

Nothing here touches the database. Validation asks a context object for
the data it needs (allowed timings, configured durations, branches,
teacher candidates), so the rules can be exercised with plain values.
"""
import logging
from dataclasses import dataclass, field, fields, replace, asdict
from enum import Enum
from typing import Optional, List, Dict, Any

from django.contrib.auth.hashers import make_password

from shared.constants import RegistrationFlows
from core.exceptions import RegistrationValidationError

logger = logging.getLogger(__name__)


class Step(str, Enum):
    PERSONAL_INFO = 'personal_info'
    COURSE_LEVEL = 'course_level'
    TEACHER = 'teacher'
    TIMING = 'timing'
    DURATION = 'duration'
    BRANCH = 'branch'
    PAYMENT_METHOD = 'payment_method'
    TERMS = 'terms'
    BILLING = 'billing'


NEW_SIGNUP_STEPS = (
    Step.PERSONAL_INFO,
    Step.COURSE_LEVEL,
    Step.TEACHER,
    Step.TIMING,
    Step.DURATION,
    Step.BRANCH,
    Step.PAYMENT_METHOD,
    Step.TERMS,
    Step.BILLING,
)

ADMIN_ENTRY_STEPS = (
    Step.PERSONAL_INFO,
    Step.COURSE_LEVEL,
    Step.BRANCH,
    Step.TIMING,
    Step.DURATION,
    Step.PAYMENT_METHOD,
    Step.BILLING,
)

FLOW_STEPS = {
    RegistrationFlows.NEW_STUDENT: NEW_SIGNUP_STEPS,
    RegistrationFlows.ADMIN_ENTRY: ADMIN_ENTRY_STEPS,
    RegistrationFlows.PREVIOUS_STUDENT: ADMIN_ENTRY_STEPS,
}

# Draft fields each step may write
STEP_FIELDS = {
    Step.PERSONAL_INFO: ('full_name_ar', 'full_name_en', 'gender', 'phone1', 'phone2',
                         'email', 'national_id', 'password_hash'),
    Step.COURSE_LEVEL: ('selected_courses', 'selected_levels', 'program', 'class_type'),
    Step.TEACHER: ('teacher_selections',),
    Step.TIMING: ('timing',),
    Step.DURATION: ('course_duration', 'custom_duration'),
    Step.BRANCH: ('branch_id',),
    Step.PAYMENT_METHOD: ('payment_method', 'amount_paid'),
    Step.TERMS: ('terms_accepted',),
    Step.BILLING: (),
}


def steps_for(flow: str):
    try:
        return FLOW_STEPS[flow]
    except KeyError:
        raise RegistrationValidationError(f"Unknown registration flow '{flow}'.")


def next_step(flow: str, step: Step) -> Optional[Step]:
    steps = steps_for(flow)
    index = steps.index(Step(step))
    return steps[index + 1] if index + 1 < len(steps) else None


def previous_step(flow: str, step: Step) -> Optional[Step]:
    steps = steps_for(flow)
    index = steps.index(Step(step))
    return steps[index - 1] if index > 0 else None


# ============ DRAFT ============

@dataclass(frozen=True)
class RegistrationDraft:
    """Everything collected so far; stored in the session as a plain dict."""
    full_name_ar: str = ''
    full_name_en: str = ''
    gender: str = ''
    phone1: str = ''
    phone2: str = ''
    email: str = ''
    national_id: str = ''
    password_hash: str = ''
    selected_courses: List[str] = field(default_factory=list)
    selected_levels: List[str] = field(default_factory=list)
    program: str = ''
    class_type: str = ''
    teacher_selections: Dict[str, int] = field(default_factory=dict)
    timing: str = ''
    course_duration: str = ''
    custom_duration: Optional[int] = None
    branch_id: Optional[int] = None
    payment_method: str = ''
    amount_paid: str = '0'
    terms_accepted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'RegistrationDraft':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    def public_dict(self) -> Dict[str, Any]:
        """Draft without the password hash, for API responses."""
        data = self.to_dict()
        data.pop('password_hash', None)
        data['has_password'] = bool(self.password_hash)
        return data


# ============ PATCH CLEANING ============

def _as_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _as_optional_int(value, name):
    if value in (None, ''):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RegistrationValidationError(
            f"'{value}' is not a valid number.",
            details={name: ["Must be a whole number."]}
        )


def clean_personal_info(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Validate the raw personal-info payload and hash the password."""
    from students.forms import StudentPersonalInfoForm

    form = StudentPersonalInfoForm(patch)
    if not form.is_valid():
        raise RegistrationValidationError(
            "Please correct the highlighted fields.",
            details=form.error_details()
        )

    data = dict(form.cleaned_data)
    data['password_hash'] = make_password(data.pop('password'))
    return data


def clean_patch(step: Step, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize a step payload into draft field values (no database access)."""
    from shared.utils import FieldMapper

    step = Step(step)
    if step == Step.PERSONAL_INFO:
        return clean_personal_info(patch)

    patch = FieldMapper.map_form_to_model(patch or {}, 'draft')
    allowed = STEP_FIELDS[step]
    data = {k: v for k, v in patch.items() if k in allowed}

    if step == Step.COURSE_LEVEL:
        data['selected_courses'] = _as_list(data.get('selected_courses'))
        data['selected_levels'] = _as_list(data.get('selected_levels'))
        for name in ('program', 'class_type'):
            if name in data:
                data[name] = str(data[name] or '').strip()
    elif step == Step.TEACHER:
        selections = data.get('teacher_selections') or {}
        if not isinstance(selections, dict):
            raise RegistrationValidationError("Teacher selections must map courses to teachers.")
        data['teacher_selections'] = {
            str(course): _as_optional_int(teacher, 'teacher_selections')
            for course, teacher in selections.items() if teacher not in (None, '')
        }
    elif step == Step.TIMING:
        timing = data.get('timing')
        if isinstance(timing, (list, tuple)):
            timing = timing[0] if timing else ''
        data['timing'] = (timing or '').strip()
    elif step == Step.DURATION:
        data['course_duration'] = str(data.get('course_duration') or '').strip()
        data['custom_duration'] = _as_optional_int(data.get('custom_duration'), 'custom_duration')
    elif step == Step.BRANCH:
        data['branch_id'] = _as_optional_int(data.get('branch_id'), 'branch_id')
    elif step == Step.PAYMENT_METHOD:
        data['payment_method'] = (data.get('payment_method') or '').strip()
        data['amount_paid'] = str(data.get('amount_paid') or '0')
    elif step == Step.TERMS:
        data['terms_accepted'] = data.get('terms_accepted') in (True, 'true', 'True', '1', 1, 'on')

    return data


def apply_step(draft: RegistrationDraft, step: Step, values: Dict[str, Any]) -> RegistrationDraft:
    """Pure reducer: a new draft with the step's fields replaced."""
    allowed = STEP_FIELDS[Step(step)]
    return replace(draft, **{k: v for k, v in values.items() if k in allowed})


def prune_teacher_selections(draft: RegistrationDraft) -> RegistrationDraft:
    """Drop teacher picks for courses that are no longer selected."""
    kept = {c: t for c, t in draft.teacher_selections.items() if c in draft.selected_courses}
    if kept == draft.teacher_selections:
        return draft
    return replace(draft, teacher_selections=kept)


# ============ VALIDATION ============

# Column sizes on the student row
PROGRAM_MAX_LENGTH = 255
CLASS_TYPE_MAX_LENGTH = 50
PAYMENT_METHOD_MAX_LENGTH = 50

def _require(errors: Dict[str, List[str]], name: str, ok: bool, message: str):
    if not ok:
        errors.setdefault(name, []).append(message)


def step_errors(draft: RegistrationDraft, step: Step, context) -> Dict[str, List[str]]:
    """
    Field errors for one step. `context` provides allowed_timings(draft),
    duration_keys(), branch_exists(branch_id) and teacher_candidates(course).
    """
    step = Step(step)
    errors: Dict[str, List[str]] = {}

    if step == Step.PERSONAL_INFO:
        for name in ('full_name_ar', 'full_name_en', 'phone1', 'email', 'national_id'):
            _require(errors, name, bool(getattr(draft, name)), "This field is required.")
        _require(errors, 'password', bool(draft.password_hash), "This field is required.")

    elif step == Step.COURSE_LEVEL:
        _require(errors, 'selected_courses', bool(draft.selected_courses or draft.selected_levels),
                 "Select at least one course or level.")
        _require(errors, 'program', len(draft.program) <= PROGRAM_MAX_LENGTH, "Program name is too long.")
        _require(errors, 'class_type', len(draft.class_type) <= CLASS_TYPE_MAX_LENGTH, "Class type is too long.")

    elif step == Step.TEACHER:
        for course in draft.selected_courses:
            candidates = context.teacher_candidates(course)
            if len(candidates) > 1:
                pick = draft.teacher_selections.get(course)
                _require(errors, 'teacher_selections', pick in candidates,
                         f"Please choose a teacher for {course}.")

    elif step == Step.TIMING:
        allowed = context.allowed_timings(draft)
        _require(errors, 'timing', bool(draft.timing), "Please select a timing.")
        if draft.timing:
            _require(errors, 'timing', draft.timing in allowed,
                     f"'{draft.timing}' is not offered for your selection.")

    elif step == Step.DURATION:
        if draft.custom_duration is not None:
            _require(errors, 'custom_duration', draft.custom_duration > 0,
                     "Custom duration must be at least one month.")
        else:
            _require(errors, 'course_duration', draft.course_duration in context.duration_keys(),
                     "Please choose a course duration.")

    elif step == Step.BRANCH:
        _require(errors, 'branch_id', draft.branch_id is not None and context.branch_exists(draft.branch_id),
                 "Please choose a branch.")

    elif step == Step.PAYMENT_METHOD:
        _require(errors, 'payment_method', bool(draft.payment_method), "Please choose a payment method.")
        _require(errors, 'payment_method', len(draft.payment_method) <= PAYMENT_METHOD_MAX_LENGTH,
                 "Payment method name is too long.")

    elif step == Step.TERMS:
        _require(errors, 'terms_accepted', draft.terms_accepted is True,
                 "You must accept the terms and conditions.")

    return errors


def validate_step(draft: RegistrationDraft, step: Step, context):
    errors = step_errors(draft, step, context)
    if errors:
        logger.debug(f"Step {Step(step).value} failed validation: {sorted(errors)}")
        raise RegistrationValidationError(
            "Please complete the required fields.",
            details=errors
        )


def validate_flow(draft: RegistrationDraft, flow: str, context):
    """Every data step of the flow; the billing signature is checked at submit."""
    errors: Dict[str, List[str]] = {}
    for step in steps_for(flow):
        for name, messages in step_errors(draft, step, context).items():
            errors.setdefault(name, []).extend(messages)
    if errors:
        raise RegistrationValidationError(
            "Registration data is incomplete. Please review your answers.",
            details=errors
        )
