# shared/utils/idempotency.py
"""
Idempotency service to prevent duplicate processing.
Used for registration submissions and payment recording.
"""
from django.core.cache import cache


class IdempotencyService:
    """Service to ensure operations are processed only once."""

    @staticmethod
    def get_key(scope, key):
        """Namespace a client key so different operations never collide."""
        return f"idemp_{scope}_{key}"

    @staticmethod
    def get_idempotency_key(request, scope='request'):
        key = request.headers.get('X-Idempotency-Key')
        if not key:
            return None

        # Prefix with user ID to ensure the key is unique to this user
        user_id = getattr(request.user, 'id', None) or 'anonymous'
        return IdempotencyService.get_key(scope, f"{user_id}_{key}")

    @staticmethod
    def check_and_lock(key, ttl=300):  # 5 minutes lock
        """
        Check if operation was already processed and lock for processing.
        Returns True if should proceed, False if duplicate.
        """
        if cache.add(f"{key}_lock", True, ttl):
            if cache.get(f"{key}_processed"):
                cache.delete(f"{key}_lock")
                return False
            return True
        return False  # Already being processed

    @staticmethod
    def is_processed(key):
        return bool(cache.get(f"{key}_processed"))

    @staticmethod
    def mark_processed(key, ttl=24 * 60 * 60):  # 24 hours
        """Mark operation as successfully processed."""
        cache.set(f"{key}_processed", True, ttl)
        cache.delete(f"{key}_lock")

    @staticmethod
    def mark_failed(key):
        """Mark operation as failed (release lock for retry)."""
        cache.delete(f"{key}_lock")
