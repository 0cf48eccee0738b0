"""Machine identifiers - opaque, validated string ids."""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Type, TypeVar

from fleetman.domain.base.result import DomainError, DomainErrorCode, Result, err, ok
from fleetman.domain.core.exceptions import InvariantViolationError

I = TypeVar("I", bound="Identifier")

ID_MIN_LENGTH = 3
ID_MAX_LENGTH = 50
_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class Identifier:
    """Base class for identifiers accepted by the persistence layer.

    Use ``create`` for untrusted input. Direct construction with a malformed
    value is a programming defect and raises ``InvariantViolationError``.
    """
    value: str

    label: ClassVar[str] = "Identifier"

    def __post_init__(self) -> None:
        error = self.validate(self.value)
        if error is not None:
            raise InvariantViolationError(error.message, {"value": self.value})

    @classmethod
    def validate(cls, raw: Any) -> Optional[DomainError]:
        """Return the first validation error for ``raw``, or None."""
        if not isinstance(raw, str) or not raw.strip():
            return DomainError.create(DomainErrorCode.INVALID_ID, f"{cls.label} cannot be empty")
        if not ID_MIN_LENGTH <= len(raw) <= ID_MAX_LENGTH:
            return DomainError.create(
                DomainErrorCode.INVALID_ID,
                f"{cls.label} must be between {ID_MIN_LENGTH} and {ID_MAX_LENGTH} characters",
            )
        if not _ID_PATTERN.fullmatch(raw):
            return DomainError.create(DomainErrorCode.INVALID_ID, f"{cls.label} contains invalid characters")
        return None

    @classmethod
    def create(cls: Type[I], raw: Any) -> Result[I]:
        error = cls.validate(raw)
        if error is not None:
            return err(error)
        return ok(cls(raw))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MachineId(Identifier):
    """Identifier of a Machine aggregate."""
    label: ClassVar[str] = "Machine ID"

    @classmethod
    def generate(cls) -> MachineId:
        return cls(f"machine_{uuid.uuid4().hex}")


@dataclass(frozen=True)
class MachineTypeId(Identifier):
    """Identifier of a machine type from the external catalogue."""
    label: ClassVar[str] = "Machine type ID"


@dataclass(frozen=True)
class UserId(Identifier):
    """Identifier of a user (owner, creator or requester)."""
    label: ClassVar[str] = "User ID"
