"""
Typed service errors and their HTTP status codes.

Services raise these; the application maps them to JSON responses in one
place (see ``watertrack.app``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ServiceError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: Iterable[FieldError], message: Optional[str] = None):
        self.errors = list(errors)
        if message is None and self.errors:
            message = "Invalid fields: " + "; ".join(
                f"{e.field}: {e.message}" for e in self.errors
            )
        super().__init__(message)

    def as_dict(self) -> dict:
        return {
            "message": self.message,
            "errors": [e.as_dict() for e in self.errors],
        }


class ConflictError(ServiceError):
    status_code = 400
    default_message = "Resource already exists"


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "Not authenticated"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"
