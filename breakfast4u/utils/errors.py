"""
Domain errors raised by services and translated into JSON responses in main.py
"""
from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto a client-facing status code"""
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Not authorized to access this resource"


class InvalidStateError(AppError):
    status_code = 400
    default_message = "Request conflicts with the current state of the resource"


class UnauthenticatedError(AppError):
    status_code = 401
    default_message = "Not authorized, no valid token"


class UnexpectedError(AppError):
    status_code = 500
    default_message = "Server error"


class InvalidInputError(AppError):
    """Malformed input caught outside pydantic (e.g. free-form query parameters)"""
    status_code = 400
    default_message = "Validation failed"
