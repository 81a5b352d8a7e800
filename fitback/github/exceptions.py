"""GitHub bridge exceptions."""

from fitback.core.exceptions import ExternalServiceError, NotFoundError, ValidationError


class GitHubError(ExternalServiceError):
    """Raised when GitHub is unreachable or answers with an error."""

    error_type = "github_error"

    def __init__(self, message: str = "Failed to communicate with GitHub"):
        super().__init__(message)


class GitHubTokenMissingError(ValidationError):
    """Raised when the OAuth code exchange returns no access token."""

    error_type = "github_token_missing"

    def __init__(self, message: str = "Failed to retrieve access token"):
        super().__init__(message)


class GistsNotFoundError(NotFoundError):
    """Raised when a GitHub user has no public gists (or does not exist)."""

    error_type = "gists_not_found"

    def __init__(self, message: str = "No gists found for this user"):
        super().__init__(message)
