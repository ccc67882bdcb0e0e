# shared/exceptions/gateway.py
"""
Exceptions raised by clients of external services (edge functions, storage).
"""


class GatewayError(Exception):
    """Exception raised when an external service call fails."""

    def __init__(self, message, user_friendly=False, original_error=None):
        self.message = message
        self.user_friendly = user_friendly
        self.original_error = original_error
        super().__init__(self.message)


class TranslationServiceError(GatewayError):
    """Exception raised when the translate-name function fails."""
    pass


class ArtifactStorageError(GatewayError):
    """Exception raised when a signature or PDF cannot be stored."""
    pass


class InvalidArtifactTokenError(Exception):
    """Exception raised when a signed artifact URL is invalid or expired."""
    pass
