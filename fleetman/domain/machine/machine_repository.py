# fleetman/domain/machine/machine_repository.py
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fleetman.domain.base.result import DomainError, Result, err, ok
from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.maintenance_alarm import (
    MaintenanceAlarm,
    MaintenanceAlarmChanges,
    NewMaintenanceAlarm,
)
from fleetman.domain.machine.value_objects import MachineId, SerialNumber


class MachineRepository(ABC):
    """
    Repository port for the Machine aggregate.

    Every public operation returns a Result; expected failures (missing
    machine, stale version, rejected alarm input) come back as Err values.
    Storage faults raise ``RepositoryError`` subclasses.

    Alarm operations are implemented here once: load the aggregate, mutate it
    through its own methods, then save it. Concrete adapters implement the
    storage primitives only:

    - ``_load``: fetch one machine, or None
    - ``_store``: write one machine as-is
    - ``_remove``: delete one machine, returning whether it existed
    - ``_all``: every stored machine
    """

    def __init__(self):
        """Initialize the in-process lock shared by compound operations."""
        self._lock = threading.RLock()

    # Storage primitives

    @abstractmethod
    def _load(self, machine_id: MachineId) -> Optional[Machine]:
        pass

    @abstractmethod
    def _store(self, machine: Machine) -> None:
        pass

    @abstractmethod
    def _remove(self, machine_id: MachineId) -> bool:
        pass

    @abstractmethod
    def _all(self) -> List[Machine]:
        pass

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Hold the in-process lock for one compound operation.

        Adapters shared across processes extend this with their own lock.
        """
        with self._lock:
            yield

    # Machine operations

    def find_by_id(self, machine_id: MachineId) -> Result[Machine]:
        with self._transaction():
            machine = self._load(machine_id)
        if machine is None:
            return err(self._not_found(machine_id))
        return ok(machine)

    def find_all(self) -> List[Machine]:
        with self._transaction():
            return self._all()

    def save(self, machine: Machine) -> Result[None]:
        """
        Insert or update a machine, conditioned on its version.

        The stored version must equal ``machine.version`` (0 for a machine
        that was never saved). On success the version is incremented on both
        the stored copy and ``machine``.
        """
        with self._transaction():
            stored = self._load(machine.machine_id)
            stored_version = stored.version if stored is not None else 0
            if machine.version != stored_version:
                return err(DomainError.conflict(
                    "Machine was modified concurrently",
                    {
                        "machine_id": str(machine.machine_id),
                        "expected_version": machine.version,
                        "stored_version": stored_version,
                    },
                ))

            machine.version += 1
            try:
                self._store(machine)
            except Exception:
                machine.version -= 1
                raise
        return ok()

    def delete(self, machine_id: MachineId) -> Result[None]:
        with self._transaction():
            removed = self._remove(machine_id)
        if not removed:
            return err(self._not_found(machine_id))
        return ok()

    def exists(self, machine_id: MachineId) -> bool:
        with self._transaction():
            return self._load(machine_id) is not None

    def exists_by_serial_number(self, serial_number: SerialNumber) -> bool:
        with self._transaction():
            return any(machine.serial_number == serial_number for machine in self._all())

    # Maintenance alarm operations

    def add_maintenance_alarm(self,
                              machine_id: MachineId,
                              props: NewMaintenanceAlarm) -> Result[MaintenanceAlarm]:
        with self._transaction():
            machine = self._load(machine_id)
            if machine is None:
                return err(self._not_found(machine_id))
            result = machine.add_maintenance_alarm(props)
            return self._save_if_ok(machine, result)

    def update_maintenance_alarm(self,
                                 machine_id: MachineId,
                                 alarm_id: str,
                                 changes: MaintenanceAlarmChanges) -> Result[MaintenanceAlarm]:
        with self._transaction():
            machine = self._load(machine_id)
            if machine is None:
                return err(self._not_found(machine_id))
            result = machine.update_maintenance_alarm(alarm_id, changes)
            return self._save_if_ok(machine, result)

    def delete_maintenance_alarm(self, machine_id: MachineId, alarm_id: str) -> Result[None]:
        with self._transaction():
            machine = self._load(machine_id)
            if machine is None:
                return err(self._not_found(machine_id))
            result = machine.remove_maintenance_alarm(alarm_id)
            return self._save_if_ok(machine, result)

    def _save_if_ok(self, machine: Machine, result: Result) -> Result:
        if result.is_err():
            return result
        saved = self.save(machine)
        if saved.is_err():
            return saved
        return result

    @staticmethod
    def _not_found(machine_id: MachineId) -> DomainError:
        return DomainError.not_found(
            f"Machine with ID {machine_id} not found",
            {"machine_id": str(machine_id)},
        )
