"""Base domain layer - shared kernel for all bounded contexts."""

from .entity import Entity
from .result import DomainError, DomainErrorCode, Err, Ok, Result, err, ok

__all__ = [
    # Entities
    "Entity",
    # Result protocol
    "Result",
    "Ok",
    "Err",
    "ok",
    "err",
    "DomainError",
    "DomainErrorCode",
]
