"""Status transition rules, kept outside the aggregate."""
from __future__ import annotations

from typing import Dict, FrozenSet, Mapping, Optional

from fleetman.domain.base.result import DomainError, Result, err, ok
from fleetman.domain.machine.machine_status import MachineStatus

_ACTIVE_STATES = frozenset({
    MachineStatus.OPERATIONAL,
    MachineStatus.MAINTENANCE,
    MachineStatus.OUT_OF_SERVICE,
})

DEFAULT_TRANSITIONS: Dict[MachineStatus, FrozenSet[MachineStatus]] = {
    status: (_ACTIVE_STATES - {status}) | {MachineStatus.RETIRED}
    for status in _ACTIVE_STATES
}
DEFAULT_TRANSITIONS[MachineStatus.RETIRED] = frozenset()


class StatusTransitionPolicy:
    """Decides whether a machine may move from one status to another.

    Staying in the current status is always allowed. Statuses missing from
    the table have no outgoing transitions.
    """

    def __init__(self, transitions: Optional[Mapping[MachineStatus, FrozenSet[MachineStatus]]] = None):
        source = DEFAULT_TRANSITIONS if transitions is None else transitions
        self._transitions = {status: frozenset(targets) for status, targets in source.items()}

    @classmethod
    def permissive(cls) -> StatusTransitionPolicy:
        every = frozenset(MachineStatus)
        return cls({status: every for status in MachineStatus})

    def allowed_targets(self, current: MachineStatus) -> FrozenSet[MachineStatus]:
        return self._transitions.get(current, frozenset())

    def can_transition(self, current: MachineStatus, target: MachineStatus) -> bool:
        return current is target or target in self.allowed_targets(current)

    def check(self, current: MachineStatus, target: MachineStatus) -> Result[None]:
        if self.can_transition(current, target):
            return ok()
        return err(DomainError.domain_rule(
            f"Cannot change machine status from {current.value} to {target.value}",
            {
                "current_status": current.value,
                "target_status": target.value,
                "allowed": sorted(status.value for status in self.allowed_targets(current)),
            },
        ))
