import json
import os
import stat

import pytest

from fleetman.domain.base.result import DomainErrorCode
from fleetman.domain.machine.maintenance_alarm import MaintenanceAlarmChanges
from fleetman.domain.machine.value_objects import MachineId, SerialNumber
from fleetman.infrastructure.persistence.exceptions import DataCorruptionError
from fleetman.infrastructure.persistence.json_machine_repository import JSONMachineRepository


@pytest.fixture
def storage_path(tmp_path):
    return str(tmp_path / "data" / "machines.json")


@pytest.fixture
def json_repository(storage_path):
    return JSONMachineRepository(storage_path)


def test_creates_storage_file(json_repository, storage_path):
    with open(storage_path) as f:
        assert json.load(f) == {"machines": {}}


def test_new_storage_file_mode(json_repository, storage_path):
    assert stat.S_IMODE(os.stat(storage_path).st_mode) == 0o644


def test_write_keeps_file_permissions(json_repository, storage_path, machine):
    os.chmod(storage_path, 0o640)

    json_repository.save(machine).unwrap()

    assert stat.S_IMODE(os.stat(storage_path).st_mode) == 0o640


def test_save_and_reload_from_new_instance(json_repository, storage_path, machine, alarm_props):
    json_repository.save(machine).unwrap()
    alarm = json_repository.add_maintenance_alarm(machine.machine_id, alarm_props).unwrap()

    reloaded = JSONMachineRepository(storage_path).find_by_id(machine.machine_id).unwrap()

    assert reloaded == machine
    assert reloaded.version == 2
    assert reloaded.serial_number == SerialNumber("CAT-320D")
    assert reloaded.get_maintenance_alarm(alarm.id).title == "Oil change"


def test_conflict_across_instances(json_repository, storage_path, machine):
    json_repository.save(machine).unwrap()
    other = JSONMachineRepository(storage_path)
    stale = other.find_by_id(machine.machine_id).unwrap()

    machine.update_machine_props(nickname="Fresh").unwrap()
    json_repository.save(machine).unwrap()
    stale.update_machine_props(nickname="Stale").unwrap()

    assert other.save(stale).unwrap_err().code == DomainErrorCode.CONFLICT
    assert json_repository.find_by_id(machine.machine_id).unwrap().nickname == "Fresh"


def test_reset_alarm_round_trip(json_repository, machine, alarm_props):
    json_repository.save(machine).unwrap()
    alarm = json_repository.add_maintenance_alarm(machine.machine_id, alarm_props).unwrap()
    json_repository.update_maintenance_alarm(
        machine.machine_id, alarm.id, MaintenanceAlarmChanges(accumulated_hours=99.5)
    ).unwrap()

    reset = json_repository.update_maintenance_alarm(
        machine.machine_id, alarm.id, MaintenanceAlarmChanges(accumulated_hours=0.0)
    ).unwrap()

    assert reset.accumulated_hours == 0
    stored = json_repository.find_by_id(machine.machine_id).unwrap()
    assert stored.get_maintenance_alarm(alarm.id).accumulated_hours == 0


def test_delete(json_repository, machine):
    json_repository.save(machine).unwrap()

    assert json_repository.delete(machine.machine_id).is_ok()
    assert json_repository.delete(machine.machine_id).unwrap_err().code == DomainErrorCode.NOT_FOUND
    assert json_repository.find_all() == []


def test_corrupt_file_raises_storage_error(json_repository, storage_path):
    with open(storage_path, "w") as f:
        f.write("{not json")

    with pytest.raises(DataCorruptionError):
        json_repository.find_by_id(MachineId("machine_1"))


def test_invalid_record_raises_storage_error(json_repository, storage_path, machine):
    json_repository.save(machine).unwrap()
    with open(storage_path) as f:
        data = json.load(f)
    data["machines"][str(machine.machine_id)]["serial_number"] = "bad serial"
    with open(storage_path, "w") as f:
        json.dump(data, f)

    with pytest.raises(DataCorruptionError):
        json_repository.find_by_id(machine.machine_id)
