"""Machine use cases."""
from typing import Any, Optional

from fleetman.application.base.use_case import UseCase
from fleetman.application.machine.queries import ListMachinesQuery, MachinePage
from fleetman.domain.base.result import DomainError, DomainErrorCode, Result, err, ok
from fleetman.domain.machine.access_policy import MachineAccessPolicy
from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.domain.machine.machine_status import MachineStatus
from fleetman.domain.machine.status_policy import StatusTransitionPolicy
from fleetman.domain.machine.value_objects import MachineId


class _ManagedMachineUseCase(UseCase):
    """Use case acting on an existing machine on behalf of a user."""

    def __init__(self,
                 repository: MachineRepository,
                 access_policy: Optional[MachineAccessPolicy] = None,
                 logger: Optional[Any] = None):
        super().__init__(repository, logger)
        self._access_policy = access_policy or MachineAccessPolicy()

    def _load_managed(self,
                      machine_id: MachineId,
                      requesting_user_id: Optional[str],
                      user_type: Optional[str]) -> Result[Machine]:
        machine_result = self._repository.find_by_id(machine_id)
        if machine_result.is_err():
            return machine_result

        machine = machine_result.unwrap()
        if not self._access_policy.can_manage(machine, requesting_user_id, user_type):
            return err(DomainError.access_denied(
                "You do not have permission to manage this machine",
                {"machine_id": str(machine_id), "user_type": user_type},
            ))
        return ok(machine)


class DeleteMachine(_ManagedMachineUseCase):
    """Delete a machine after the ownership check."""

    operation = "Delete machine"

    def execute(self, machine_id: str, requesting_user_id: str, user_type: str) -> Result[None]:
        def body() -> Result[None]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result

            machine_result = self._load_managed(id_result.unwrap(), requesting_user_id, user_type)
            if machine_result.is_err():
                return machine_result

            return self._repository.delete(id_result.unwrap())

        return self._run(body, machine_id=machine_id,
                         requesting_user_id=requesting_user_id, user_type=user_type)


class GetMachine(_ManagedMachineUseCase):
    operation = "Get machine"

    def execute(self, machine_id: str, requesting_user_id: str, user_type: str) -> Result[Machine]:
        def body() -> Result[Machine]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result
            return self._load_managed(id_result.unwrap(), requesting_user_id, user_type)

        return self._run(body, machine_id=machine_id,
                         requesting_user_id=requesting_user_id, user_type=user_type)


class CreateMachine(UseCase):
    """Register a new machine; serial numbers are unique across the fleet."""

    operation = "Create machine"

    def execute(self,
                serial_number: str,
                brand: str,
                model: str,
                machine_type_id: str,
                owner_id: str,
                created_by_id: str,
                nickname: Optional[str] = None,
                initial_status: Optional[str] = None) -> Result[Machine]:
        def body() -> Result[Machine]:
            machine_result = Machine.create(
                serial_number=serial_number,
                brand=brand,
                model=model,
                machine_type_id=machine_type_id,
                owner_id=owner_id,
                created_by_id=created_by_id,
                nickname=nickname,
                initial_status=initial_status,
            )
            if machine_result.is_err():
                return machine_result

            machine = machine_result.unwrap()
            if self._repository.exists_by_serial_number(machine.serial_number):
                return err(DomainError.create(
                    DomainErrorCode.DUPLICATE_MACHINE_SERIAL,
                    f"A machine with serial number {machine.serial_number.masked()} already exists",
                ))

            save_result = self._repository.save(machine)
            if save_result.is_err():
                return save_result

            self._logger.info("Machine registered", machine=machine.log_info())
            return ok(machine)

        return self._run(body, owner_id=owner_id, created_by_id=created_by_id,
                         machine_type_id=machine_type_id)


class UpdateMachine(_ManagedMachineUseCase):
    """
    Update descriptive fields and/or status of a machine.

    Status moves are checked against the injected ``StatusTransitionPolicy``;
    an illegal move fails with DOMAIN_RULE_VIOLATION and nothing is saved.
    The save is version-checked, so a concurrent modification surfaces as
    CONFLICT.
    """

    operation = "Update machine"

    def __init__(self,
                 repository: MachineRepository,
                 access_policy: Optional[MachineAccessPolicy] = None,
                 status_policy: Optional[StatusTransitionPolicy] = None,
                 logger: Optional[Any] = None):
        super().__init__(repository, access_policy, logger)
        self._status_policy = status_policy or StatusTransitionPolicy()

    def execute(self,
                machine_id: str,
                requesting_user_id: str,
                user_type: str,
                brand: Optional[str] = None,
                model: Optional[str] = None,
                nickname: Optional[str] = None,
                status: Optional[str] = None) -> Result[Machine]:
        def body() -> Result[Machine]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result

            machine_result = self._load_managed(id_result.unwrap(), requesting_user_id, user_type)
            if machine_result.is_err():
                return machine_result
            machine = machine_result.unwrap()

            if brand is not None or model is not None or nickname is not None:
                props_result = machine.update_machine_props(brand=brand, model=model, nickname=nickname)
                if props_result.is_err():
                    return props_result

            if status is not None:
                status_result = MachineStatus.from_code(status)
                if status_result.is_err():
                    return status_result
                target = status_result.unwrap()

                transition = self._status_policy.check(machine.status, target)
                if transition.is_err():
                    return transition
                machine.change_status(target)

            save_result = self._repository.save(machine)
            if save_result.is_err():
                return save_result
            return ok(machine)

        return self._run(body, machine_id=machine_id,
                         requesting_user_id=requesting_user_id, user_type=user_type)


class ListMachines(UseCase):
    """
    List machines with filters and paging.

    Users whose type is subject to the ownership check only ever see their
    own machines, whatever ``owner_id`` they pass. Brand matching and the
    free-text ``search`` (serial number, brand, model, nickname) are
    case-insensitive substring matches. Results are ordered by creation time.
    """

    operation = "List machines"

    def __init__(self,
                 repository: MachineRepository,
                 access_policy: Optional[MachineAccessPolicy] = None,
                 logger: Optional[Any] = None):
        super().__init__(repository, logger)
        self._access_policy = access_policy or MachineAccessPolicy()

    def execute(self, requesting_user_id: str, user_type: str, **filters: Any) -> Result[MachinePage]:
        def body() -> Result[MachinePage]:
            query_result = self._build(ListMachinesQuery, **filters)
            if query_result.is_err():
                return query_result
            query = query_result.unwrap()

            status = None
            if query.status is not None:
                status_result = MachineStatus.from_code(query.status)
                if status_result.is_err():
                    return status_result
                status = status_result.unwrap()

            owner_id = self._access_policy.owner_scope(requesting_user_id, user_type)
            if owner_id is None:
                owner_id = query.owner_id

            machines = sorted(
                (machine for machine in self._repository.find_all()
                 if _matches(machine, query, owner_id, status)),
                key=lambda machine: (machine.created_at, str(machine.machine_id)),
            )
            start = (query.page - 1) * query.limit
            page = MachinePage(
                items=machines[start:start + query.limit],
                total=len(machines),
                page=query.page,
                limit=query.limit,
            )
            self._logger.info("Machines listed", total=page.total, returned=len(page.items))
            return ok(page)

        return self._run(body, requesting_user_id=requesting_user_id, user_type=user_type)


def _matches(machine: Machine,
             query: ListMachinesQuery,
             owner_id: Optional[str],
             status: Optional[MachineStatus]) -> bool:
    if owner_id is not None and not machine.is_owned_by(owner_id):
        return False
    if query.machine_type_id is not None and str(machine.machine_type_id) != query.machine_type_id:
        return False
    if status is not None and machine.status is not status:
        return False
    if query.brand is not None and query.brand.lower() not in machine.brand.lower():
        return False
    if query.search is not None:
        term = query.search.lower()
        haystack = (str(machine.serial_number), machine.brand, machine.model, machine.nickname or "")
        if not any(term in value.lower() for value in haystack):
            return False
    return True
