from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no session is active."""


class NotFoundError(DomainError):
    """Raised when a service is asked to act on a record that does not exist."""


class StoreError(DomainError):
    """Raised when a call to the record store or the file store fails.

    ``operation`` names the failed call (e.g. ``"attendance.insert"``) so
    callers can report it without inspecting the underlying driver error.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
