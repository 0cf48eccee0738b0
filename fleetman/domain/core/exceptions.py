# fleetman/domain/core/exceptions.py
from typing import Any, List, Optional


class DomainException(Exception):
    """Base exception for programmer errors raised by the domain layer.

    Expected business failures are never raised; they travel as ``Err`` values.
    """
    pass


class InvariantViolationError(DomainException):
    """Raised when a domain object is constructed in an invalid state."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class UnwrapError(DomainException):
    """Raised when a Result is unwrapped on the wrong side."""
    def __init__(self, message: str, error: Any = None):
        super().__init__(message)
        self.error = error


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class RepositoryError(DomainException):
    """Raised by repository adapters when the backing store fails."""
    pass
