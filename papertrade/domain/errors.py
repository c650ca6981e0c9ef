"""
Base domain errors shared by every bounded context.

Each category maps to one HTTP status at the interface layer.
Context-specific errors subclass one of these categories.
No framework imports allowed.
"""

from typing import Optional


class DomainError(Exception):
    """Base error for all domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Raised when input is well-formed but semantically invalid."""

    def __init__(self, message: str, errors: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""


class ResourceNotFoundError(NotFoundError):
    """Raised when a user-owned record is missing or belongs to someone else."""

    def __init__(
        self, resource: str, resource_id: object, message: Optional[str] = None
    ) -> None:
        super().__init__(message or f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(DomainError):
    """Raised when a write collides with an existing unique record."""


class BusinessRuleError(DomainError):
    """Raised when a request violates a business rule."""


class AuthenticationError(DomainError):
    """Raised when the caller cannot be identified."""


class PermissionDeniedError(DomainError):
    """Raised when the caller is identified but not allowed to proceed."""


class InvalidOperationError(BusinessRuleError):
    """Raised when an operation is not allowed in the current state."""
