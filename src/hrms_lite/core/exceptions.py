from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, errors: Optional[Sequence[FieldError]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule."""


class NotFoundError(DomainError):
    """Raised when the targeted record does not exist."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class AuthenticationError(DomainError):
    """Raised when a request carries no resolved caller."""
