# admissions/session.py
"""
RegistrationSession: the wizard's lifecycle over a session-like mapping.
"""
import logging
import uuid
from typing import Optional, List

from django.apps import apps

from shared.constants import (
    REGISTRATION_SESSION_KEY,
    REGISTRATION_STEP_KEY,
    REGISTRATION_FLOW_KEY,
    ConfigTypes,
)
from core.exceptions import RegistrationValidationError
from core.services import ConfigurationService, TimingAvailabilityResolver
from users.services import TeacherAssignmentRules
from . import wizard
from .wizard import Step, RegistrationDraft

logger = logging.getLogger(__name__)

SUBMISSION_KEY = 'student_registration_submission'


class WizardContext:
    """Database-backed lookups used by step validation (cached per request)."""

    def __init__(self):
        self._duration_keys = None
        self._candidates = {}
        self._timings = {}

    def allowed_timings(self, draft: RegistrationDraft) -> List[str]:
        cache_key = (draft.branch_id, tuple(draft.selected_levels), tuple(draft.selected_courses))
        if cache_key not in self._timings:
            timings = TimingAvailabilityResolver.for_branch(
                draft.branch_id, draft.selected_levels, draft.selected_courses
            )
            if not timings and not TimingAvailabilityResolver.for_branch(draft.branch_id):
                # No classes scheduled yet: the configured timing list applies
                timings = [o.label for o in ConfigurationService.load(ConfigTypes.TIMING)]
            self._timings[cache_key] = timings
        return self._timings[cache_key]

    def duration_keys(self) -> List[str]:
        if self._duration_keys is None:
            self._duration_keys = [o.key for o in ConfigurationService.load(ConfigTypes.COURSE_DURATION)]
        return self._duration_keys

    def branch_exists(self, branch_id) -> bool:
        Branch = apps.get_model('core', 'Branch')
        return Branch.objects.filter(id=branch_id).exists()

    def teacher_candidates(self, course) -> List[int]:
        if course not in self._candidates:
            self._candidates[course] = TeacherAssignmentRules.candidates_for_course(course)
        return self._candidates[course]


class RegistrationSession:
    """
    Explicit lifecycle for one in-progress registration:
    start -> mutate (repeatedly) / back -> finalize -> discard.
    """

    SELECTION_STEPS = (Step.COURSE_LEVEL, Step.BRANCH)

    def __init__(self, storage, context=None):
        self.storage = storage
        self.context = context or WizardContext()

    # ============ STATE ============

    @property
    def is_active(self) -> bool:
        return REGISTRATION_FLOW_KEY in self.storage

    @property
    def flow(self) -> str:
        if not self.is_active:
            raise RegistrationValidationError("No registration in progress. Please start over.")
        return self.storage[REGISTRATION_FLOW_KEY]

    @property
    def current_step(self) -> Step:
        return Step(self.storage.get(REGISTRATION_STEP_KEY) or wizard.steps_for(self.flow)[0])

    @property
    def draft(self) -> RegistrationDraft:
        return RegistrationDraft.from_dict(self.storage.get(REGISTRATION_SESSION_KEY))

    @property
    def submission_key(self) -> Optional[str]:
        return self.storage.get(SUBMISSION_KEY)

    def _save(self, draft: RegistrationDraft, step: Step):
        self.storage[REGISTRATION_SESSION_KEY] = draft.to_dict()
        self.storage[REGISTRATION_STEP_KEY] = Step(step).value
        if hasattr(self.storage, 'modified'):
            self.storage.modified = True

    def state(self) -> dict:
        steps = wizard.steps_for(self.flow)
        return {
            'flow': self.flow,
            'current_step': self.current_step.value,
            'steps': [s.value for s in steps],
            'draft': self.draft.public_dict(),
            'allowed_timings': self.context.allowed_timings(self.draft),
        }

    # ============ LIFECYCLE ============

    def start(self, flow: str) -> RegistrationDraft:
        steps = wizard.steps_for(flow)
        self.discard()
        self.storage[REGISTRATION_FLOW_KEY] = flow
        self.storage[SUBMISSION_KEY] = uuid.uuid4().hex
        draft = RegistrationDraft()
        self._save(draft, steps[0])
        logger.info(f"Registration started: flow={flow}")
        return draft

    def mutate(self, step, patch) -> RegistrationDraft:
        """
        Apply the current step's payload, validate it and move forward.

        Raises:
            RegistrationValidationError: wrong step or invalid data (draft unchanged)
        """
        step = Step(step)
        flow = self.flow
        if step not in wizard.steps_for(flow):
            raise RegistrationValidationError(f"Step '{step.value}' is not part of this registration.")
        if step != self.current_step:
            raise RegistrationValidationError(
                f"Please complete the '{self.current_step.value}' step first.",
                details={'current_step': self.current_step.value}
            )
        if step == Step.BILLING:
            raise RegistrationValidationError("Sign the billing form and submit to finish.")

        before = self.draft
        values = wizard.clean_patch(step, patch or {})
        draft = wizard.apply_step(before, step, values)

        if step == Step.COURSE_LEVEL:
            draft = wizard.prune_teacher_selections(draft)

        timing_dropped = False
        if step in self.SELECTION_STEPS:
            draft = self._prune_timing(draft)
            timing_dropped = bool(before.timing) and not draft.timing

        wizard.validate_step(draft, step, self.context)

        upcoming = wizard.next_step(flow, step) or step
        steps = wizard.steps_for(flow)
        if timing_dropped and steps.index(Step.TIMING) < steps.index(upcoming):
            # The chosen timing is gone; send the student back to pick another
            upcoming = Step.TIMING

        self._save(draft, upcoming)
        logger.debug(f"Registration step {step.value} completed")
        return draft

    def back(self) -> Step:
        """Move one step back without validating."""
        previous = wizard.previous_step(self.flow, self.current_step)
        if previous is not None:
            self._save(self.draft, previous)
        return self.current_step

    def finalize(self) -> RegistrationDraft:
        """The complete, validated draft; only valid on the billing step."""
        if self.current_step != Step.BILLING:
            raise RegistrationValidationError(
                "Please complete all registration steps first.",
                details={'current_step': self.current_step.value}
            )
        draft = self.draft
        wizard.validate_flow(draft, self.flow, self.context)
        return draft

    def discard(self):
        for key in (REGISTRATION_SESSION_KEY, REGISTRATION_STEP_KEY, REGISTRATION_FLOW_KEY, SUBMISSION_KEY):
            self.storage.pop(key, None)

    # ============ HELPERS ============

    def _prune_timing(self, draft: RegistrationDraft) -> RegistrationDraft:
        if not draft.timing:
            return draft
        allowed = self.context.allowed_timings(draft)
        kept = TimingAvailabilityResolver.prune([draft.timing], allowed)
        if kept:
            return draft
        return wizard.apply_step(draft, Step.TIMING, {'timing': ''})
