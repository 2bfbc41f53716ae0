"""
Application error hierarchy.

Every error carries the HTTP status it maps to; main.py registers a single
exception handler that renders them as {"detail": message}.
"""

from typing import Any, Dict, Optional


class JoblyError(Exception):
    """Base exception for application errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class BadRequestError(JoblyError):
    """Invalid request data."""

    status_code = 400


class UnauthorizedError(JoblyError):
    """Invalid credentials."""

    status_code = 401


class NotFoundError(JoblyError):
    """Resource not found."""

    status_code = 404


class DuplicateError(BadRequestError):
    """Row already exists (duplicate check or unique constraint)."""


class EmptyPayloadError(BadRequestError):
    """Partial update called without any fields."""

    def __init__(self, message: str = "No data"):
        super().__init__(message)


class UnknownFieldError(BadRequestError):
    """Filter or update references a field that was not declared."""

    def __init__(self, field: str):
        super().__init__(f"Unknown field: {field}", details={"field": field})
        self.field = field


class InvalidFilterValueError(BadRequestError):
    """A filter value failed its declared type or range check."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid value for {field}: {reason}",
            details={"field": field, "value": repr(value)},
        )
        self.field = field
        self.value = value
