from datetime import datetime, timezone

import pytest

from fleetman.application.machine.use_cases import (
    CreateMachine,
    DeleteMachine,
    GetMachine,
    ListMachines,
    UpdateMachine,
)
from fleetman.domain.base.result import DomainError, DomainErrorCode, err, ok
from fleetman.domain.machine.access_policy import MachineAccessPolicy
from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.machine_status import MachineStatus
from fleetman.domain.machine.status_policy import StatusTransitionPolicy

OWNER_ID = "user_owner"


class TestDeleteMachine:
    def test_client_owner_can_delete(self, repository, stored_machine, mock_logger):
        use_case = DeleteMachine(repository, logger=mock_logger)

        result = use_case.execute(str(stored_machine.machine_id), OWNER_ID, "CLIENT")

        assert result.is_ok()
        assert result.unwrap() is None
        assert repository.find_by_id(stored_machine.machine_id).unwrap_err().code == DomainErrorCode.NOT_FOUND

    def test_client_non_owner_is_denied(self, repository, stored_machine, mock_logger):
        use_case = DeleteMachine(repository, logger=mock_logger)

        result = use_case.execute(str(stored_machine.machine_id), "user_other", "CLIENT")

        assert result.unwrap_err().code == DomainErrorCode.ACCESS_DENIED
        assert repository.find_by_id(stored_machine.machine_id).is_ok()

    @pytest.mark.parametrize("user_type", ["TECHNICIAN", "ADMIN", "client"])
    def test_non_client_bypasses_ownership(self, repository, stored_machine, mock_logger, user_type):
        use_case = DeleteMachine(repository, logger=mock_logger)

        result = use_case.execute(str(stored_machine.machine_id), "user_other", user_type)

        assert result.is_ok()

    def test_missing_machine_is_not_found(self, repository, mock_logger):
        result = DeleteMachine(repository, logger=mock_logger).execute("machine_missing", OWNER_ID, "CLIENT")

        assert result.unwrap_err().code == DomainErrorCode.NOT_FOUND

    def test_invalid_id_skips_repository(self, mock_repository, mock_logger):
        result = DeleteMachine(mock_repository, logger=mock_logger).execute("x", OWNER_ID, "CLIENT")

        assert result.unwrap_err().code == DomainErrorCode.INVALID_ID
        mock_repository.find_by_id.assert_not_called()
        mock_repository.delete.assert_not_called()

    def test_deletes_through_repository(self, mock_repository, mock_logger, machine):
        mock_repository.find_by_id.return_value = ok(machine)
        mock_repository.delete.return_value = ok()

        DeleteMachine(mock_repository, logger=mock_logger).execute(str(machine.machine_id), "user_other", "ADMIN")

        mock_repository.delete.assert_called_once_with(machine.machine_id)


class TestCreateMachine:
    def test_creates_and_saves(self, repository, machine_props, mock_logger):
        machine = CreateMachine(repository, logger=mock_logger).execute(**machine_props).unwrap()

        assert str(machine.serial_number) == "CAT-320D"
        assert machine.version == 1
        assert repository.find_by_id(machine.machine_id).unwrap().brand == "Caterpillar"

    def test_rejects_duplicate_serial(self, repository, stored_machine, machine_props, mock_logger):
        machine_props["serial_number"] = "cat-320d"

        result = CreateMachine(repository, logger=mock_logger).execute(**machine_props)

        error = result.unwrap_err()
        assert error.code == DomainErrorCode.DUPLICATE_MACHINE_SERIAL
        assert "CAT-320D" not in error.message
        assert len(repository) == 1

    def test_invalid_input_skips_repository(self, mock_repository, machine_props, mock_logger):
        machine_props["serial_number"] = "AB"

        result = CreateMachine(mock_repository, logger=mock_logger).execute(**machine_props)

        assert result.unwrap_err().code == DomainErrorCode.INVALID_SERIAL_NUMBER
        mock_repository.save.assert_not_called()


class TestGetMachine:
    def test_owner_can_read(self, repository, stored_machine, mock_logger):
        machine = GetMachine(repository, logger=mock_logger).execute(
            str(stored_machine.machine_id), OWNER_ID, "CLIENT"
        ).unwrap()

        assert machine == stored_machine

    def test_other_client_is_denied(self, repository, stored_machine, mock_logger):
        result = GetMachine(repository, logger=mock_logger).execute(
            str(stored_machine.machine_id), "user_other", "CLIENT"
        )

        assert result.unwrap_err().code == DomainErrorCode.ACCESS_DENIED

    def test_uses_injected_access_policy(self, repository, stored_machine, mock_logger):
        policy = MachineAccessPolicy(frozenset({"TECHNICIAN"}))

        result = GetMachine(repository, policy, logger=mock_logger).execute(
            str(stored_machine.machine_id), "user_other", "TECHNICIAN"
        )

        assert result.unwrap_err().code == DomainErrorCode.ACCESS_DENIED


class TestUpdateMachine:
    def test_updates_props_and_status(self, repository, stored_machine, mock_logger):
        use_case = UpdateMachine(repository, logger=mock_logger)

        machine = use_case.execute(
            str(stored_machine.machine_id), OWNER_ID, "CLIENT",
            nickname="Super Crawler", status="MAINTENANCE",
        ).unwrap()

        stored = repository.find_by_id(stored_machine.machine_id).unwrap()
        assert machine.version == stored.version == 2
        assert stored.nickname == "Super Crawler"
        assert stored.status is MachineStatus.MAINTENANCE

    def test_invalid_props_are_not_saved(self, repository, stored_machine, mock_logger):
        result = UpdateMachine(repository, logger=mock_logger).execute(
            str(stored_machine.machine_id), OWNER_ID, "CLIENT", brand="   "
        )

        assert result.unwrap_err().code == DomainErrorCode.VALIDATION_ERROR
        assert repository.find_by_id(stored_machine.machine_id).unwrap().brand == "Caterpillar"

    def test_retired_machine_cannot_be_reactivated(self, repository, stored_machine, mock_logger):
        use_case = UpdateMachine(repository, logger=mock_logger)
        machine_id = str(stored_machine.machine_id)
        use_case.execute(machine_id, OWNER_ID, "CLIENT", status="RETIRED").unwrap()

        result = use_case.execute(machine_id, OWNER_ID, "CLIENT", status="OPERATIONAL", nickname="Back")

        assert result.unwrap_err().code == DomainErrorCode.DOMAIN_RULE_VIOLATION
        stored = repository.find_by_id(stored_machine.machine_id).unwrap()
        assert stored.status is MachineStatus.RETIRED
        assert stored.nickname is None

    def test_permissive_policy_allows_reactivation(self, repository, stored_machine, mock_logger):
        use_case = UpdateMachine(repository, status_policy=StatusTransitionPolicy.permissive(), logger=mock_logger)
        machine_id = str(stored_machine.machine_id)
        use_case.execute(machine_id, OWNER_ID, "CLIENT", status="RETIRED").unwrap()

        result = use_case.execute(machine_id, OWNER_ID, "CLIENT", status="OPERATIONAL")

        assert result.unwrap().status is MachineStatus.OPERATIONAL

    def test_unknown_status(self, repository, stored_machine, mock_logger):
        result = UpdateMachine(repository, logger=mock_logger).execute(
            str(stored_machine.machine_id), OWNER_ID, "CLIENT", status="SCRAPPED"
        )

        assert result.unwrap_err().code == DomainErrorCode.VALIDATION_ERROR

    def test_stale_version_surfaces_conflict(self, mock_repository, machine, mock_logger):
        mock_repository.find_by_id.return_value = ok(machine)
        mock_repository.save.return_value = err(DomainError.conflict("Machine was modified concurrently"))

        result = UpdateMachine(mock_repository, logger=mock_logger).execute(
            str(machine.machine_id), OWNER_ID, "CLIENT", nickname="Racer"
        )

        assert result.unwrap_err().code == DomainErrorCode.CONFLICT
        mock_repository.save.assert_called_once()

    def test_non_owner_client_is_denied(self, repository, stored_machine, mock_logger):
        result = UpdateMachine(repository, logger=mock_logger).execute(
            str(stored_machine.machine_id), "user_other", "CLIENT", nickname="Mine"
        )

        assert result.unwrap_err().code == DomainErrorCode.ACCESS_DENIED


class TestListMachines:
    @pytest.fixture
    def fleet(self, repository, machine_props):
        specs = [
            ("CAT-001", "Caterpillar", "320D", "excavator", OWNER_ID, "Digger"),
            ("CAT-002", "Caterpillar", "D6", "dozer", OWNER_ID, None),
            ("KOM-001", "Komatsu", "PC200", "excavator", "user_neighbor", None),
        ]
        machines = []
        for minute, (serial, brand, model, type_id, owner, nickname) in enumerate(specs):
            machine = Machine.create(**{
                **machine_props,
                "serial_number": serial,
                "brand": brand,
                "model": model,
                "machine_type_id": type_id,
                "owner_id": owner,
                "nickname": nickname,
            }).unwrap()
            machine.created_at = datetime(2024, 1, 1, 12, minute, tzinfo=timezone.utc)
            repository.save(machine).unwrap()
            machines.append(machine)
        return machines

    def test_client_only_sees_own_machines(self, repository, fleet, mock_logger):
        page = ListMachines(repository, logger=mock_logger).execute(OWNER_ID, "CLIENT").unwrap()

        assert [str(m.serial_number) for m in page.items] == ["CAT-001", "CAT-002"]
        assert page.total == 2

    def test_client_cannot_widen_scope_with_owner_filter(self, repository, fleet, mock_logger):
        page = ListMachines(repository, logger=mock_logger).execute(
            OWNER_ID, "CLIENT", owner_id="user_neighbor"
        ).unwrap()

        assert all(m.is_owned_by(OWNER_ID) for m in page.items)

    def test_other_user_types_see_everything(self, repository, fleet, mock_logger):
        page = ListMachines(repository, logger=mock_logger).execute("user_tech", "TECHNICIAN").unwrap()

        assert page.total == 3

    @pytest.mark.parametrize("filters, expected", [
        ({"machine_type_id": "excavator"}, ["CAT-001", "KOM-001"]),
        ({"brand": "komat"}, ["KOM-001"]),
        ({"search": "digger"}, ["CAT-001"]),
        ({"search": "kom-"}, ["KOM-001"]),
        ({"owner_id": "user_neighbor"}, ["KOM-001"]),
    ])
    def test_filters(self, repository, fleet, mock_logger, filters, expected):
        page = ListMachines(repository, logger=mock_logger).execute("user_admin", "ADMIN", **filters).unwrap()

        assert [str(m.serial_number) for m in page.items] == expected

    def test_status_filter(self, repository, fleet, mock_logger):
        fleet[1].change_status(MachineStatus.MAINTENANCE).unwrap()
        repository.save(fleet[1]).unwrap()

        page = ListMachines(repository, logger=mock_logger).execute(
            "user_admin", "ADMIN", status="maintenance"
        ).unwrap()

        assert [str(m.serial_number) for m in page.items] == ["CAT-002"]

    def test_unknown_status_is_validation_error(self, mock_repository, mock_logger):
        result = ListMachines(mock_repository, logger=mock_logger).execute("user_admin", "ADMIN", status="SCRAPPED")

        assert result.unwrap_err().code == DomainErrorCode.VALIDATION_ERROR
        mock_repository.find_all.assert_not_called()

    def test_paging(self, repository, fleet, mock_logger):
        page = ListMachines(repository, logger=mock_logger).execute("user_admin", "ADMIN", page=2, limit=2).unwrap()

        assert [str(m.serial_number) for m in page.items] == ["KOM-001"]
        assert page.total == 3
        assert page.total_pages == 2

    def test_limit_is_capped(self, mock_repository, mock_logger):
        mock_repository.find_all.return_value = []

        page = ListMachines(mock_repository, logger=mock_logger).execute("user_admin", "ADMIN", limit=500).unwrap()

        assert page.limit == 100
        assert page.total_pages == 0

    @pytest.mark.parametrize("filters", [{"page": 0}, {"limit": 0}, {"colour": "yellow"}])
    def test_invalid_query_is_validation_error(self, mock_repository, mock_logger, filters):
        result = ListMachines(mock_repository, logger=mock_logger).execute("user_admin", "ADMIN", **filters)

        assert result.unwrap_err().code == DomainErrorCode.VALIDATION_ERROR
        mock_repository.find_all.assert_not_called()
