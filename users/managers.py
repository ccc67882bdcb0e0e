# users/managers.py
"""
CUSTOM USER MANAGER - Uses email as username
"""
from django.contrib.auth.models import UserManager as BaseUserManager
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """
    Custom manager for User model with email as username.
    Inherits from BaseUserManager for Django auth compatibility.
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular User with the given email and password.

        Args:
            email: User's email address (required)
            password: Raw password; the account gets an unusable one when omitted
            **extra_fields: Additional user fields

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError(_('The Email must be set'))

        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_user_with_hash(self, email, password_hash, **extra_fields):
        """Create a user whose password was already hashed (registration drafts never hold raw passwords)."""
        user = self.create_user(email, None, **extra_fields)
        if password_hash:
            user.password = password_hash
            user.save(update_fields=['password'])
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)

    def email_exists(self, email) -> bool:
        return self.filter(email__iexact=(email or '').strip()).exists()
