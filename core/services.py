# core/services.py
"""
Core services: configuration loading, branch eligibility and timing availability.
Pure computations take plain values so they can run without the database.
"""
import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, List, Dict, Any, Iterable

from django.apps import apps

# SHARED IMPORTS
from shared.constants import StatusChoices, ConfigTypes
from . import config_values

logger = logging.getLogger(__name__)


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'core'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


ARABIC_MARKS = re.compile(r"[\u064B-\u0652\u0640]")
LEVEL_PATTERN = re.compile(r'level[\s\-_]?(\d{1,2})', re.IGNORECASE)


def normalize_text(value) -> str:
    """Trim, casefold and drop Arabic diacritics/tatweel."""
    return ARABIC_MARKS.sub('', str(value or '')).strip().casefold()


def level_key(value) -> Optional[str]:
    """'Level 5 (1A)' -> 'level-5'; None when the value carries no level number."""
    match = LEVEL_PATTERN.search(normalize_text(value))
    if not match:
        return None
    return f"level-{int(match.group(1))}"


def _level_token(value) -> str:
    return level_key(value) or normalize_text(value)


def _dedupe(values: Iterable) -> List:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


# ============ CONFIGURATION LOADER ============

class ConfigurationService:
    """
    Reads ConfigurationItem rows and decodes them into typed options.
    Ordering is display_order ascending, ties by insertion order.
    """

    GROUP_NAMES = {
        ConfigTypes.COURSE: 'courses',
        ConfigTypes.BRANCH: 'branches',
        ConfigTypes.PAYMENT_METHOD: 'payment_methods',
        ConfigTypes.PROGRAM: 'programs',
        ConfigTypes.CLASS_TYPE: 'class_types',
        ConfigTypes.FIELD_LABEL: 'field_labels',
        ConfigTypes.COURSE_DURATION: 'course_durations',
        ConfigTypes.TIMING: 'timings',
        ConfigTypes.LEVEL: 'levels',
        ConfigTypes.SETTING: 'settings',
    }

    @staticmethod
    def queryset(config_type=None, include_inactive=False):
        ConfigurationItem = _get_model('ConfigurationItem')
        qs = ConfigurationItem.objects.all()
        if config_type:
            qs = qs.filter(config_type=config_type)
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return qs.order_by('display_order', 'id')

    @staticmethod
    def load(config_type=None, include_inactive=False) -> List[config_values.ConfigOption]:
        return [
            config_values.decode(item)
            for item in ConfigurationService.queryset(config_type, include_inactive)
        ]

    @staticmethod
    def grouped() -> Dict[str, List[config_values.ConfigOption]]:
        """All active options keyed by their group name (courses, branches, ...)."""
        groups = {name: [] for name in ConfigurationService.GROUP_NAMES.values()}
        for item in ConfigurationService.queryset():
            name = ConfigurationService.GROUP_NAMES.get(item.config_type, item.config_type)
            groups.setdefault(name, []).append(config_values.decode(item))
        return groups

    @staticmethod
    def setting_enabled(key: str) -> bool:
        item = ConfigurationService.queryset(ConfigTypes.SETTING).filter(config_key=key).first()
        return bool(item) and item.config_value.strip().lower() == 'true'

    @staticmethod
    def save_option(config_type, option, display_order=0, price=None):
        """Create or update the row for an option, encoding its value."""
        ConfigurationItem = _get_model('ConfigurationItem')
        item, created = ConfigurationItem.objects.update_or_create(
            config_type=config_type,
            config_key=option.key,
            defaults={
                'config_value': config_values.encode(config_type, option),
                'display_order': display_order,
                'price': price if price is not None else getattr(option, 'price', None),
                'is_active': True,
            }
        )
        logger.info(f"{'Created' if created else 'Updated'} configuration {item}")
        return item

    @staticmethod
    def deactivate(item):
        """Soft delete used by the inline editor."""
        item.is_active = False
        item.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Deactivated configuration {item}")

    @staticmethod
    def delete(item):
        """Physical delete used by the bulk editor."""
        label = str(item)
        item.delete()
        logger.info(f"Deleted configuration {label}")

    @staticmethod
    def duration_price_table() -> Dict[str, Decimal]:
        """
        {duration_key: price} from priced course_duration rows, falling back
        to CoursePricing (duration_months -> price) for keys without a price.
        """
        table = {}
        missing = []
        for option in ConfigurationService.load(ConfigTypes.COURSE_DURATION):
            if option.price is not None:
                table[option.key] = option.price
            else:
                missing.append(option)

        CoursePricing = _get_model('CoursePricing', 'billing')
        by_months = {
            str(row.duration_months): row.price
            for row in CoursePricing.objects.all()
        }
        for option in missing:
            months = str(option.months) if option.months is not None else option.key
            if months in by_months:
                table[option.key] = by_months[months]

        # Plain month counts stay resolvable even without a duration row
        for months, price in by_months.items():
            table.setdefault(months, price)

        return table


# ============ BRANCH ELIGIBILITY ============

@dataclass
class BranchEligibility:
    branch_id: Optional[int] = None
    is_restricted: bool = False
    allowed_levels: List[str] = field(default_factory=list)
    allowed_level_keys: List[str] = field(default_factory=list)
    allowed_courses: List[str] = field(default_factory=list)
    allowed_timings: List[str] = field(default_factory=list)
    allowed_programs: List[str] = field(default_factory=list)
    allowed_start_dates: List[str] = field(default_factory=list)

    KINDS = {
        'level': 'allowed_levels',
        'course': 'allowed_courses',
        'timing': 'allowed_timings',
        'program': 'allowed_programs',
        'start_date': 'allowed_start_dates',
    }

    def is_allowed(self, kind: str, value) -> bool:
        """Unrestricted allows everything; otherwise case-insensitive membership."""
        if not self.is_restricted:
            return True
        if kind not in self.KINDS:
            raise ValueError(f"Unknown eligibility kind: {kind}")

        if kind == 'level':
            key = level_key(value)
            if key and key in self.allowed_level_keys:
                return True

        target = normalize_text(value)
        return any(normalize_text(v) == target for v in getattr(self, self.KINDS[kind]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branch_id': self.branch_id,
            'is_restricted': self.is_restricted,
            'allowed_levels': self.allowed_levels,
            'allowed_level_keys': self.allowed_level_keys,
            'allowed_courses': self.allowed_courses,
            'allowed_timings': self.allowed_timings,
            'allowed_programs': self.allowed_programs,
            'allowed_start_dates': self.allowed_start_dates,
        }


class BranchEligibilityService:
    """Derives what a branch actually offers from its active classes."""

    @staticmethod
    def from_classes(branch_id, classes) -> BranchEligibility:
        """
        `classes` are ClassOffering-like objects (timing, courses, levels,
        program, start_date). A null branch is unrestricted.
        """
        if branch_id is None:
            return BranchEligibility()

        levels, level_keys, courses, timings, programs, start_dates = [], [], [], [], [], []
        for cls in classes:
            programs.append(cls.program)
            timings.append(cls.timing)
            if cls.start_date:
                start_dates.append(str(cls.start_date))
            for level in cls.levels or []:
                levels.append(level)
                level_keys.append(level_key(level))
            for course in cls.courses or []:
                courses.append((course or '').strip())

        return BranchEligibility(
            branch_id=branch_id,
            is_restricted=True,
            allowed_levels=_dedupe(levels),
            allowed_level_keys=_dedupe(level_keys),
            allowed_courses=_dedupe(courses),
            allowed_timings=_dedupe(timings),
            allowed_programs=_dedupe(programs),
            allowed_start_dates=_dedupe(start_dates),
        )

    @staticmethod
    def active_classes(branch_id=None):
        ClassOffering = _get_model('ClassOffering')
        qs = ClassOffering.objects.filter(status=StatusChoices.ACTIVE)
        if branch_id is not None:
            qs = qs.filter(branch_id=branch_id)
        return qs.order_by('id')

    @staticmethod
    def for_branch(branch_id) -> BranchEligibility:
        if branch_id is None:
            return BranchEligibility()

        classes = list(BranchEligibilityService.active_classes(branch_id))
        if not classes:
            logger.warning(f"No active classes found for branch {branch_id}")

        eligibility = BranchEligibilityService.from_classes(branch_id, classes)
        logger.debug(
            f"Branch {branch_id} offers {len(eligibility.allowed_timings)} timings, "
            f"{len(eligibility.allowed_courses)} courses"
        )
        return eligibility


# ============ TIMING AVAILABILITY ============

class TimingAvailabilityResolver:
    """
    A class contributes its timing when the selected levels intersect its
    levels OR the selected courses intersect its courses.
    """

    @staticmethod
    def _clean(values) -> List[str]:
        return [v for v in (values or []) if v and str(v).strip()]

    @staticmethod
    def class_matches(cls, selected_levels, selected_courses) -> bool:
        level_tokens = {_level_token(v) for v in selected_levels}
        course_tokens = {normalize_text(v) for v in selected_courses}

        if level_tokens and any(_level_token(v) in level_tokens for v in cls.levels or []):
            return True
        if course_tokens and any(normalize_text(v) in course_tokens for v in cls.courses or []):
            return True
        return False

    @staticmethod
    def allowed_timings(classes, selected_levels=None, selected_courses=None) -> List[str]:
        levels = TimingAvailabilityResolver._clean(selected_levels)
        courses = TimingAvailabilityResolver._clean(selected_courses)
        classes = list(classes)

        if not levels and not courses:
            return _dedupe(cls.timing for cls in classes)

        return _dedupe(
            cls.timing for cls in classes
            if TimingAvailabilityResolver.class_matches(cls, levels, courses)
        )

    @staticmethod
    def prune(selected_timings, allowed) -> List[str]:
        """Drop timings that are no longer offered."""
        allowed_set = set(allowed)
        kept = [t for t in (selected_timings or []) if t in allowed_set]
        dropped = [t for t in (selected_timings or []) if t not in allowed_set]
        if dropped:
            logger.info(f"Dropped timings no longer available: {dropped}")
        return kept

    @staticmethod
    def for_branch(branch_id, selected_levels=None, selected_courses=None) -> List[str]:
        classes = BranchEligibilityService.active_classes(branch_id)
        return TimingAvailabilityResolver.allowed_timings(classes, selected_levels, selected_courses)
