"""Core domain primitives shared by every bounded context."""

from .exceptions import (
    ConfigurationError,
    DomainException,
    InvariantViolationError,
    RepositoryError,
    UnwrapError,
)

__all__ = [
    "DomainException",
    "InvariantViolationError",
    "UnwrapError",
    "ConfigurationError",
    "RepositoryError",
]
