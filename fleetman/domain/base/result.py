"""Result protocol - uniform success/failure values for expected outcomes.

Every fallible domain and application operation returns either ``Ok(value)``
or ``Err(DomainError)``. Exceptions are reserved for programmer errors.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from fleetman.domain.core.exceptions import UnwrapError

T = TypeVar("T")
E = TypeVar("E")


class DomainErrorCode(str, Enum):
    """Closed set of error codes produced by the core."""
    INVALID_ID = "INVALID_ID"
    INVALID_SERIAL_NUMBER = "INVALID_SERIAL_NUMBER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_MAINTENANCE_INTERVAL = "INVALID_MAINTENANCE_INTERVAL"
    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    DOMAIN_RULE_VIOLATION = "DOMAIN_RULE_VIOLATION"
    DUPLICATE_MACHINE_SERIAL = "DUPLICATE_MACHINE_SERIAL"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class DomainError:
    """Coded, loggable failure value.

    ``code`` is a plain string so repository-specific codes can pass through
    untouched; ``DomainErrorCode`` members compare equal to their string value.
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = field(default=None, compare=False)

    @classmethod
    def create(cls, code: Union[DomainErrorCode, str], message: str,
               details: Optional[Dict[str, Any]] = None) -> DomainError:
        return cls(code=_code_value(code), message=message, details=details)

    @classmethod
    def validation(cls, message: str, details: Optional[Dict[str, Any]] = None) -> DomainError:
        return cls.create(DomainErrorCode.VALIDATION_ERROR, message, details)

    @classmethod
    def not_found(cls, message: str, details: Optional[Dict[str, Any]] = None) -> DomainError:
        return cls.create(DomainErrorCode.NOT_FOUND, message, details)

    @classmethod
    def access_denied(cls, message: str, details: Optional[Dict[str, Any]] = None) -> DomainError:
        return cls.create(DomainErrorCode.ACCESS_DENIED, message, details)

    @classmethod
    def domain_rule(cls, message: str, details: Optional[Dict[str, Any]] = None) -> DomainError:
        return cls.create(DomainErrorCode.DOMAIN_RULE_VIOLATION, message, details)

    @classmethod
    def conflict(cls, message: str, details: Optional[Dict[str, Any]] = None) -> DomainError:
        return cls.create(DomainErrorCode.CONFLICT, message, details)

    @classmethod
    def internal(cls, message: str) -> DomainError:
        return cls.create(DomainErrorCode.INTERNAL_ERROR, message)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = dict(self.details)
        return data

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


def _code_value(code: Union[DomainErrorCode, str]) -> str:
    return code.value if isinstance(code, DomainErrorCode) else str(code)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""
    value: T = None

    @property
    def success(self) -> bool:
        return True

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> DomainError:
        raise UnwrapError("Called unwrap_err() on an Ok result")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a DomainError."""
    error: E

    @property
    def success(self) -> bool:
        return False

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise UnwrapError(f"Called unwrap() on an Err result: {self.error}", self.error)

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[DomainError]]


def ok(value: Any = None) -> Ok:
    return Ok(value)


def err(error: DomainError) -> Err:
    return Err(error)
