import pytest
from unittest.mock import Mock

from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.domain.machine.maintenance_alarm import NewMaintenanceAlarm
from fleetman.infrastructure.persistence.in_memory_machine_repository import InMemoryMachineRepository

OWNER_ID = "user_owner"
CREATOR_ID = "user_admin"


@pytest.fixture
def machine_props():
    return {
        "serial_number": "  cat-320d  ",
        "brand": "Caterpillar",
        "model": "320D",
        "machine_type_id": "excavator",
        "owner_id": OWNER_ID,
        "created_by_id": CREATOR_ID,
    }


@pytest.fixture
def machine(machine_props):
    return Machine.create(**machine_props).unwrap()


@pytest.fixture
def alarm_props():
    return NewMaintenanceAlarm(
        title="Oil change",
        description="Replace engine oil and filter",
        related_parts=["oil-filter", "engine-oil"],
        interval_hours=250,
        created_by=CREATOR_ID,
    )


@pytest.fixture
def repository():
    return InMemoryMachineRepository()


@pytest.fixture
def stored_machine(repository, machine):
    repository.save(machine).unwrap()
    return machine


@pytest.fixture
def mock_repository():
    return Mock(spec=MachineRepository)


@pytest.fixture
def mock_logger():
    return Mock()
