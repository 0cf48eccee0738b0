"""Maintenance alarm use cases."""
from typing import Any, List, Optional

from fleetman.application.base.use_case import UseCase
from fleetman.domain.base.result import DomainError, Result, err, ok
from fleetman.domain.machine.maintenance_alarm import (
    MaintenanceAlarm,
    MaintenanceAlarmChanges,
    NewMaintenanceAlarm,
)


def _check_alarm_id(alarm_id: Any) -> Optional[DomainError]:
    if not isinstance(alarm_id, str) or not alarm_id.strip():
        return DomainError.validation("Alarm ID is required")
    return None


class CreateMaintenanceAlarm(UseCase):
    """Append a new alarm to a machine.

    The alarm always starts with zero accumulated hours, active, and never
    triggered. The repository's result is returned as-is.
    """

    operation = "Create maintenance alarm"

    def execute(self,
                machine_id: str,
                title: str,
                interval_hours: float,
                created_by: str,
                description: Optional[str] = None,
                related_parts: Optional[List[str]] = None) -> Result[MaintenanceAlarm]:
        def body() -> Result[MaintenanceAlarm]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result

            props_result = self._build(
                NewMaintenanceAlarm,
                title=title,
                description=description,
                related_parts=related_parts if related_parts is not None else [],
                interval_hours=interval_hours,
                created_by=created_by,
            )
            if props_result.is_err():
                return props_result

            return self._repository.add_maintenance_alarm(id_result.unwrap(), props_result.unwrap())

        return self._run(body, machine_id=machine_id)


class ListMaintenanceAlarms(UseCase):
    """Return a machine's alarms in insertion order, optionally filtered by ``is_active``."""

    operation = "List maintenance alarms"

    def execute(self, machine_id: str, is_active: Optional[bool] = None) -> Result[List[MaintenanceAlarm]]:
        def body() -> Result[List[MaintenanceAlarm]]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result

            machine_result = self._repository.find_by_id(id_result.unwrap())
            if machine_result.is_err():
                return machine_result

            return ok(machine_result.unwrap().get_maintenance_alarms(is_active=is_active))

        return self._run(body, machine_id=machine_id, is_active=is_active)


class ResetMaintenanceAlarm(UseCase):
    """
    Manually reset an alarm's accumulated hours to zero.

    Only ``accumulated_hours`` is written: ``times_triggered`` and
    ``last_triggered_at`` belong to automatic triggering and are never
    touched here. ``reset_to_zero`` is accepted for callers that send it and
    is only logged; a manual reset always zeroes the accumulator.
    """

    operation = "Reset maintenance alarm"

    def execute(self, machine_id: str, alarm_id: str, reset_to_zero: bool = True) -> Result[MaintenanceAlarm]:
        def body() -> Result[MaintenanceAlarm]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result
            alarm_error = _check_alarm_id(alarm_id)
            if alarm_error is not None:
                return err(alarm_error)

            return self._repository.update_maintenance_alarm(
                id_result.unwrap(),
                alarm_id,
                MaintenanceAlarmChanges(accumulated_hours=0.0),
            )

        return self._run(body, machine_id=machine_id, alarm_id=alarm_id, reset_to_zero=reset_to_zero)


class UpdateMaintenanceAlarm(UseCase):
    """
    Partially update the user-editable fields of an alarm.

    Arguments left as None are unchanged; pass an empty string to clear the
    description. Counters (accumulated hours, trigger count and timestamp)
    cannot be changed through this use case.
    """

    operation = "Update maintenance alarm"

    def execute(self,
                machine_id: str,
                alarm_id: str,
                title: Optional[str] = None,
                description: Optional[str] = None,
                related_parts: Optional[List[str]] = None,
                interval_hours: Optional[float] = None,
                is_active: Optional[bool] = None) -> Result[MaintenanceAlarm]:
        def body() -> Result[MaintenanceAlarm]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result
            alarm_error = _check_alarm_id(alarm_id)
            if alarm_error is not None:
                return err(alarm_error)

            supplied = {
                name: value
                for name, value in (
                    ("title", title),
                    ("description", description),
                    ("related_parts", related_parts),
                    ("interval_hours", interval_hours),
                    ("is_active", is_active),
                )
                if value is not None
            }
            if not supplied:
                return err(DomainError.validation("At least one field must be provided"))

            changes_result = self._build(MaintenanceAlarmChanges, **supplied)
            if changes_result.is_err():
                return changes_result

            return self._repository.update_maintenance_alarm(
                id_result.unwrap(), alarm_id, changes_result.unwrap()
            )

        return self._run(body, machine_id=machine_id, alarm_id=alarm_id)


class DeleteMaintenanceAlarm(UseCase):
    """Remove an alarm from its machine (hard delete)."""

    operation = "Delete maintenance alarm"

    def execute(self, machine_id: str, alarm_id: str) -> Result[None]:
        def body() -> Result[None]:
            id_result = self._parse_machine_id(machine_id)
            if id_result.is_err():
                return id_result
            alarm_error = _check_alarm_id(alarm_id)
            if alarm_error is not None:
                return err(alarm_error)

            return self._repository.delete_maintenance_alarm(id_result.unwrap(), alarm_id)

        return self._run(body, machine_id=machine_id, alarm_id=alarm_id)
