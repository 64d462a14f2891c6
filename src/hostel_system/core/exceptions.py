from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(ValidationError):
    """Raised when a referenced record does not exist."""


class InvalidTransitionError(ValidationError):
    """Raised when a status change is not allowed from the current state."""


class ContentRejectedError(ValidationError):
    """Raised when the moderation service refuses text or evidence."""

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ModerationUnavailableError(DomainError):
    """Raised when the external moderation service cannot be reached."""
