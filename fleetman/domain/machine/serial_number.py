"""Serial number value object."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from fleetman.domain.base.result import DomainError, DomainErrorCode, Result, err, ok
from fleetman.domain.core.exceptions import InvariantViolationError

SERIAL_MIN_LENGTH = 3
SERIAL_MAX_LENGTH = 50
MASK = "***"

_SERIAL_CHARSET = re.compile(r"[A-Z0-9_-]+")
_ONLY_SEPARATORS = re.compile(r"[-_]+")
_ALPHANUMERIC = re.compile(r"[A-Z0-9]")


def _invalid(message: str) -> DomainError:
    return DomainError.create(DomainErrorCode.INVALID_SERIAL_NUMBER, message)


@dataclass(frozen=True)
class SerialNumber:
    """Normalized (trimmed, upper-cased) machine serial code."""
    value: str

    def __post_init__(self) -> None:
        if self.value != self.value.strip().upper() or self.validate(self.value) is not None:
            raise InvariantViolationError(
                "SerialNumber must be built from a normalized value; use SerialNumber.create()",
                {"value": self.value},
            )

    @staticmethod
    def validate(raw: Any) -> Optional[DomainError]:
        """Run the ordered checks; the first failure wins."""
        if not isinstance(raw, str) or not raw.strip():
            return _invalid("Serial number cannot be empty")

        normalized = raw.strip().upper()

        if not SERIAL_MIN_LENGTH <= len(normalized) <= SERIAL_MAX_LENGTH:
            return _invalid(
                f"Serial number must be between {SERIAL_MIN_LENGTH} and {SERIAL_MAX_LENGTH} characters"
            )
        if not _SERIAL_CHARSET.fullmatch(normalized):
            return _invalid(
                "Serial number contains invalid characters. "
                "Only letters, numbers, hyphens and underscores allowed"
            )
        if _ONLY_SEPARATORS.fullmatch(normalized):
            return _invalid("Serial number cannot be only hyphens or underscores")
        if not _ALPHANUMERIC.search(normalized):
            return _invalid("Serial number must contain at least one alphanumeric character")
        return None

    @classmethod
    def create(cls, raw: Any) -> Result[SerialNumber]:
        error = cls.validate(raw)
        if error is not None:
            return err(error)
        return ok(cls(raw.strip().upper()))

    def masked(self) -> str:
        """Partially hidden form, safe for logs."""
        if len(self.value) <= 4:
            return f"{self.value[:2]}{MASK}"
        return f"{self.value[:3]}{MASK}{self.value[-2:]}"

    def matches_pattern(self, pattern: str) -> bool:
        """Case-insensitive search; an invalid pattern never matches."""
        try:
            return re.search(pattern, self.value, re.IGNORECASE) is not None
        except (re.error, TypeError):
            return False

    def __str__(self) -> str:
        return self.value
