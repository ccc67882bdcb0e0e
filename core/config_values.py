# core/config_values.py
"""
Typed views over ConfigurationItem.config_value.

Each config_type has exactly one variant; decode/encode are the only
places that know how a variant is stored.
"""
import json
import logging
import re
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Optional, Union

from shared.constants import ConfigTypes
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r'\d+')


@dataclass(frozen=True)
class SimpleOption:
    key: str
    label: str
    config_type: str = ''

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class CourseOption:
    key: str
    label: str
    category: str = ''
    price: Optional[Decimal] = None
    config_type: str = ConfigTypes.COURSE

    def to_dict(self):
        data = asdict(self)
        data['price'] = str(self.price) if self.price is not None else None
        return data


@dataclass(frozen=True)
class DurationOption:
    key: str
    label: str
    months: Optional[int] = None
    price: Optional[Decimal] = None
    config_type: str = ConfigTypes.COURSE_DURATION

    def to_dict(self):
        data = asdict(self)
        data['price'] = str(self.price) if self.price is not None else None
        return data


ConfigOption = Union[SimpleOption, CourseOption, DurationOption]


def parse_months(key) -> Optional[int]:
    """First integer embedded in a duration key ('3', '3 months', 'm6')."""
    match = NUMBER_PATTERN.search(str(key or ''))
    return int(match.group()) if match else None


# ============ DECODERS ============

def _decode_course(item) -> CourseOption:
    try:
        payload = json.loads(item.config_value)
    except (TypeError, ValueError) as e:
        logger.error(f"Malformed course config value for {item.config_key}: {e}")
        raise ConfigurationError(
            f"Course configuration '{item.config_key}' is not valid JSON.",
            details={'config_key': item.config_key}
        )

    if not isinstance(payload, dict) or not payload.get('label'):
        raise ConfigurationError(
            f"Course configuration '{item.config_key}' must define a label.",
            details={'config_key': item.config_key}
        )

    return CourseOption(
        key=item.config_key,
        label=str(payload['label']),
        category=str(payload.get('category') or ''),
        price=item.price,
    )


def _decode_duration(item) -> DurationOption:
    return DurationOption(
        key=item.config_key,
        label=item.config_value,
        months=parse_months(item.config_key),
        price=item.price,
    )


def decode(item) -> ConfigOption:
    """Turn a ConfigurationItem row into its typed option."""
    if item.config_type == ConfigTypes.COURSE:
        return _decode_course(item)
    if item.config_type == ConfigTypes.COURSE_DURATION:
        return _decode_duration(item)
    return SimpleOption(key=item.config_key, label=item.config_value, config_type=item.config_type)


def encode(config_type, option) -> str:
    """Produce the stored config_value for an option of the given type."""
    if config_type == ConfigTypes.COURSE:
        if not isinstance(option, CourseOption):
            raise ConfigurationError("Course rows need a CourseOption.")
        return json.dumps({'label': option.label, 'category': option.category}, ensure_ascii=False)
    return option.label
