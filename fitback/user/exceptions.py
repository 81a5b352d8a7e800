"""User domain exceptions.

User-related exceptions for not found and conflict scenarios.
"""

from fitback.core.exceptions import ConflictError, NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when user cannot be found."""

    error_type = "user_not_found"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class EmailExistsError(ConflictError):
    """Raised when attempting to register or edit to an existing email."""

    error_type = "email_exists"

    def __init__(
        self, message: str = "User already exists, please use a different email"
    ):
        super().__init__(message)
