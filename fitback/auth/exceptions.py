"""Auth domain exceptions.

Authentication and verification related exceptions.
"""

from fitback.core.exceptions import AuthenticationError, ValidationError


# Authentication errors (401)
class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password combination is invalid.

    Unknown email and wrong password share this error and its message.
    """

    error_type = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is malformed, tampered with or expired."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class NotAuthenticatedError(AuthenticationError):
    """Raised when a gated request carries no session token at all."""

    error_type = "not_authenticated"

    def __init__(self, message: str = "Unauthorized: No token provided"):
        super().__init__(message)


# Validation errors (400) - auth specific
class EmailNotVerifiedError(ValidationError):
    """Raised when signing in before the email address was verified."""

    error_type = "email_not_verified"

    def __init__(self, message: str = "Please verify your email first"):
        super().__init__(message)


class TokenNotFoundError(ValidationError):
    """Raised when a verification token matches no pending verification."""

    error_type = "token_not_found"

    def __init__(self, message: str = "Invalid verification token"):
        super().__init__(message)
