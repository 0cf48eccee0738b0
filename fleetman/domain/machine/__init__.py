"""Machine bounded context - machine aggregate and its maintenance alarms."""

from .access_policy import MachineAccessPolicy
from .machine_aggregate import Machine
from .machine_repository import MachineRepository
from .maintenance_alarm import MaintenanceAlarm, MaintenanceAlarmChanges, NewMaintenanceAlarm
from .status_policy import DEFAULT_TRANSITIONS, StatusTransitionPolicy
from .value_objects import MachineId, MachineStatus, MachineTypeId, SerialNumber, UserId

__all__ = [
    "Machine",
    "MaintenanceAlarm",
    "NewMaintenanceAlarm",
    "MaintenanceAlarmChanges",
    "MachineRepository",
    "MachineAccessPolicy",
    "StatusTransitionPolicy",
    "DEFAULT_TRANSITIONS",
    "MachineId",
    "MachineTypeId",
    "UserId",
    "SerialNumber",
    "MachineStatus",
]
