"""Compute domain exceptions."""

from fitback.core.exceptions import ServiceUnavailableError


class ComputeBusyError(ServiceUnavailableError):
    """Raised when the compute pool already holds its maximum of pending jobs."""

    error_type = "compute_busy"

    def __init__(self, message: str = "Too many computations in progress, try again later"):
        super().__init__(message)
