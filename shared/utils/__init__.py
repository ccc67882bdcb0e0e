from .field_mapping import FieldMapper
from .idempotency import IdempotencyService

__all__ = ['FieldMapper', 'IdempotencyService']
