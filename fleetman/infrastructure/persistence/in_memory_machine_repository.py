# fleetman/infrastructure/persistence/in_memory_machine_repository.py
import copy
from typing import Any, Dict, List, Optional

from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.domain.machine.value_objects import MachineId
from fleetman.infrastructure.logging.logger import get_logger


class InMemoryMachineRepository(MachineRepository):
    """
    Process-local machine repository.

    Machines are kept in their serialized form so callers never share state
    with the store; every load returns a fresh aggregate.
    """

    def __init__(self, machines: Optional[List[Machine]] = None):
        super().__init__()
        self._records: Dict[str, Dict[str, Any]] = {}
        self._logger = get_logger(__name__)
        for machine in machines or []:
            self._records[str(machine.machine_id)] = machine.to_dict()

    def _load(self, machine_id: MachineId) -> Optional[Machine]:
        record = self._records.get(str(machine_id))
        return Machine.from_dict(copy.deepcopy(record)) if record is not None else None

    def _store(self, machine: Machine) -> None:
        self._records[str(machine.machine_id)] = machine.to_dict()
        self._logger.debug("Stored machine", machine_id=str(machine.machine_id), version=machine.version)

    def _remove(self, machine_id: MachineId) -> bool:
        return self._records.pop(str(machine_id), None) is not None

    def _all(self) -> List[Machine]:
        return [Machine.from_dict(copy.deepcopy(record)) for record in self._records.values()]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
