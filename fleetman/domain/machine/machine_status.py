"""Machine status - closed enumeration of lifecycle states."""
from __future__ import annotations

from enum import Enum
from typing import Any, List

from fleetman.domain.base.result import DomainError, Result, err, ok


class MachineStatus(str, Enum):
    """Lifecycle states of a machine.

    The aggregate accepts any member; which moves are legal is decided by
    ``StatusTransitionPolicy``.
    """
    OPERATIONAL = "OPERATIONAL"
    MAINTENANCE = "MAINTENANCE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    RETIRED = "RETIRED"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def is_operational(self) -> bool:
        return self is MachineStatus.OPERATIONAL

    @property
    def is_terminal(self) -> bool:
        return self is MachineStatus.RETIRED

    @classmethod
    def codes(cls) -> List[str]:
        return [status.value for status in cls]

    @classmethod
    def from_code(cls, code: Any) -> Result[MachineStatus]:
        """Parse a status code, case-insensitively."""
        if isinstance(code, cls):
            return ok(code)
        if isinstance(code, str):
            try:
                return ok(cls(code.strip().upper()))
            except ValueError:
                pass
        return err(DomainError.validation(
            f"Invalid machine status: {code}",
            {"allowed": cls.codes()},
        ))
