"""
Shared services aggregator.
Safe to import without triggering circular imports.
"""

from .translation import NameTranslationService


__all__ = [
    'NameTranslationService',
]
