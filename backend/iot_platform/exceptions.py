"""Exception hierarchy for the IoT platform API.

Every error carries the HTTP status code the API reports for it, so the
exception handlers in ``main.py`` can turn any of them into a failure
envelope without a lookup table.
"""


class PlatformError(Exception):
    """Base exception for all platform errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlatformError):
    """Raised when a request is missing required fields or carries bad values."""

    status_code = 400


class NotFoundError(PlatformError):
    """Raised when no document matches an identifier."""

    status_code = 404

    def __init__(self, resource: str, identifier=None):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier


class ConflictError(PlatformError):
    """Raised when a create would duplicate an existing identifier."""

    status_code = 409


class DatabaseError(PlatformError):
    """Raised when a database operation fails."""
