"""Error taxonomy surfaced through the API envelope.

Handlers raise these; ``mealbook.main`` maps them to
``{"success": false, "error": ...}`` with the matching status code.
"""
from fastapi import status


class MealbookError(Exception):
    """Base class for errors that map to an HTTP status."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(MealbookError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(MealbookError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ValidationError(MealbookError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(MealbookError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(MealbookError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"
