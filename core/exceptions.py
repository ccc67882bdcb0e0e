# core/exceptions.py
class InstituteManagementException(Exception):
    """Base exception for all institute management errors."""

    status_code = 400

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or "An error occurred"
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)

class AuthenticationError(InstituteManagementException):
    """Authentication and authorization errors."""
    status_code = 403

    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Authentication failed", user_friendly, details, "AUTH_ERROR")

class RegistrationValidationError(InstituteManagementException):
    """A wizard step or submission is missing/has malformed required fields."""
    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Validation failed", user_friendly, details, "VALIDATION_ERROR")

class DuplicateEmailError(InstituteManagementException):
    """The email is already registered to a student."""
    status_code = 409

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(
            message or "This email is already registered. Please sign in instead.",
            user_friendly, details, "DUPLICATE_EMAIL"
        )

class BackendOperationError(InstituteManagementException):
    """An insert/update/upload failed part-way through an operation."""
    status_code = 500

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Operation failed. Please try again.", user_friendly, details, "BACKEND_ERROR")

class ConfigurationError(InstituteManagementException):
    """Malformed configuration rows."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Invalid configuration", user_friendly, details, "CONFIG_ERROR")

class PaymentProcessingError(InstituteManagementException):
    """Payment-related errors."""
    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Payment processing failed", user_friendly, details, "PAYMENT_ERROR")

class AdminSetupError(InstituteManagementException):
    """Errors during one-time admin bootstrap."""
    status_code = 403

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Admin setup failed", user_friendly, details, "SETUP_ERROR")

class SubmissionInProgressError(InstituteManagementException):
    """Another request is already processing the same submission."""
    status_code = 409

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(
            message or "This registration is already being processed. Please wait.",
            user_friendly, details, "IN_PROGRESS"
        )
