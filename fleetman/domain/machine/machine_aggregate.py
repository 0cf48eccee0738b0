from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from fleetman.domain.base.result import DomainError, Result, err, ok
from fleetman.domain.core.exceptions import InvariantViolationError
from fleetman.domain.machine.maintenance_alarm import (
    MaintenanceAlarm,
    MaintenanceAlarmChanges,
    NewMaintenanceAlarm,
    validate_accumulated_hours,
    validate_description,
    validate_interval_hours,
    validate_related_parts,
    validate_title,
)
from fleetman.domain.machine.value_objects import (
    MachineId,
    MachineStatus,
    MachineTypeId,
    SerialNumber,
    UserId,
)

BRAND_MAX_LENGTH = 50
MODEL_MAX_LENGTH = 50
NICKNAME_MAX_LENGTH = 30


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_descriptive_props(brand: Any, model: Any, nickname: Any) -> Optional[DomainError]:
    """Return the first error for brand, model and nickname, or None."""
    if not isinstance(brand, str) or not brand.strip():
        return DomainError.validation("Brand is required")
    if not isinstance(model, str) or not model.strip():
        return DomainError.validation("Model is required")
    if len(brand) > BRAND_MAX_LENGTH:
        return DomainError.validation("Brand name is too long")
    if len(model) > MODEL_MAX_LENGTH:
        return DomainError.validation("Model name is too long")
    if nickname is not None:
        if not isinstance(nickname, str):
            return DomainError.validation("Nickname must be text")
        if len(nickname) > NICKNAME_MAX_LENGTH:
            return DomainError.validation("Nickname is too long")
    return None


def _validate_is_active(value: Any) -> Optional[DomainError]:
    if not isinstance(value, bool):
        return DomainError.validation("is_active must be a boolean")
    return None


def _trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


_ALARM_FIELD_VALIDATORS: Dict[str, Callable[[Any], Optional[DomainError]]] = {
    "title": validate_title,
    "description": validate_description,
    "related_parts": validate_related_parts,
    "interval_hours": validate_interval_hours,
    "is_active": _validate_is_active,
    "accumulated_hours": validate_accumulated_hours,
}


@dataclass(eq=False)
class Machine:
    """Machine aggregate root.

    Owns identity, descriptive fields, ownership, status and the ordered list
    of maintenance alarms. Build new machines with ``Machine.create``; every
    mutator validates first and applies all-or-nothing.
    """
    machine_id: MachineId
    serial_number: SerialNumber
    brand: str
    model: str
    machine_type_id: MachineTypeId
    owner_id: UserId
    created_by_id: UserId
    status: MachineStatus = MachineStatus.OPERATIONAL
    nickname: Optional[str] = None
    maintenance_alarms: List[MaintenanceAlarm] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        error = validate_descriptive_props(self.brand, self.model, self.nickname)
        if error is not None:
            raise InvariantViolationError(error.message, {"machine_id": str(self.machine_id)})
        if not isinstance(self.status, MachineStatus):
            raise InvariantViolationError(f"Invalid machine status: {self.status!r}")

    @classmethod
    def create(cls,
               *,
               serial_number: str,
               brand: str,
               model: str,
               machine_type_id: str,
               owner_id: str,
               created_by_id: str,
               nickname: Optional[str] = None,
               initial_status: Optional[Union[MachineStatus, str]] = None) -> Result[Machine]:
        """Validate every field and build a new machine, or return the first error."""
        serial_result = SerialNumber.create(serial_number)
        if serial_result.is_err():
            return serial_result

        machine_type_result = MachineTypeId.create(machine_type_id)
        if machine_type_result.is_err():
            return machine_type_result

        owner_result = UserId.create(owner_id)
        if owner_result.is_err():
            return owner_result

        creator_result = UserId.create(created_by_id)
        if creator_result.is_err():
            return creator_result

        clean_nickname = _trim(nickname) or None
        error = validate_descriptive_props(_trim(brand), _trim(model), clean_nickname)
        if error is not None:
            return err(error)

        status = MachineStatus.OPERATIONAL
        if initial_status is not None:
            status_result = MachineStatus.from_code(initial_status)
            if status_result.is_err():
                return status_result
            status = status_result.unwrap()

        now = utcnow()
        return ok(cls(
            machine_id=MachineId.generate(),
            serial_number=serial_result.unwrap(),
            brand=brand.strip(),
            model=model.strip(),
            machine_type_id=machine_type_result.unwrap(),
            owner_id=owner_result.unwrap(),
            created_by_id=creator_result.unwrap(),
            status=status,
            nickname=clean_nickname,
            created_at=now,
            updated_at=now,
        ))

    # Descriptive fields and status

    def update_machine_props(self,
                             brand: Optional[str] = None,
                             model: Optional[str] = None,
                             nickname: Optional[str] = None) -> Result[None]:
        """Partially update descriptive fields.

        Unset (None) fields are left untouched. A blank nickname clears it.
        Nothing is applied if any supplied field is invalid.
        """
        for name, value in (("Brand", brand), ("Model", model), ("Nickname", nickname)):
            if value is not None and not isinstance(value, str):
                return err(DomainError.validation(f"{name} must be text"))

        final_brand = brand.strip() if brand is not None else self.brand
        final_model = model.strip() if model is not None else self.model
        final_nickname = (nickname.strip() or None) if nickname is not None else self.nickname

        error = validate_descriptive_props(final_brand, final_model, final_nickname)
        if error is not None:
            return err(error)

        self.brand = final_brand
        self.model = final_model
        self.nickname = final_nickname
        self._touch()
        return ok()

    def change_status(self, status: Union[MachineStatus, str]) -> Result[None]:
        """Set any valid status; transition legality is decided by the caller."""
        status_result = MachineStatus.from_code(status)
        if status_result.is_err():
            return status_result

        new_status = status_result.unwrap()
        if new_status is not self.status:
            self.status = new_status
            self._touch()
        return ok()

    @property
    def is_operational(self) -> bool:
        return self.status.is_operational

    @property
    def is_retired(self) -> bool:
        return self.status is MachineStatus.RETIRED

    @property
    def display_name(self) -> str:
        return self.nickname or f"{self.brand} {self.model}"

    def is_owned_by(self, user_id: Union[UserId, str]) -> bool:
        return self.owner_id.value == str(user_id)

    # Maintenance alarms

    def add_maintenance_alarm(self, props: NewMaintenanceAlarm) -> Result[MaintenanceAlarm]:
        """Append a new alarm with its counters at their initial values."""
        error = (validate_title(props.title)
                 or validate_description(props.description)
                 or validate_related_parts(props.related_parts)
                 or validate_interval_hours(props.interval_hours))
        if error is None and not props.created_by.strip():
            error = DomainError.validation("Alarm creator is required")
        if error is not None:
            return err(error)

        now = utcnow()
        alarm = MaintenanceAlarm(
            title=props.title.strip(),
            description=_trim(props.description) or None,
            related_parts=[part.strip() for part in props.related_parts],
            interval_hours=props.interval_hours,
            accumulated_hours=0.0,
            is_active=True,
            times_triggered=0,
            last_triggered_at=None,
            created_by=props.created_by.strip(),
            created_at=now,
            updated_at=now,
        )
        self.maintenance_alarms.append(alarm)
        self._touch(now)
        return ok(alarm)

    def get_maintenance_alarm(self, alarm_id: str) -> Optional[MaintenanceAlarm]:
        index = self._alarm_index(alarm_id)
        return self.maintenance_alarms[index] if index is not None else None

    def get_maintenance_alarms(self, is_active: Optional[bool] = None) -> List[MaintenanceAlarm]:
        """Alarms in insertion order, optionally filtered by ``is_active``."""
        if is_active is None:
            return list(self.maintenance_alarms)
        return [alarm for alarm in self.maintenance_alarms if alarm.is_active is is_active]

    def update_maintenance_alarm(self,
                                 alarm_id: str,
                                 changes: MaintenanceAlarmChanges) -> Result[MaintenanceAlarm]:
        """Apply the explicitly-set fields of ``changes`` all-or-nothing."""
        index = self._alarm_index(alarm_id)
        if index is None:
            return err(self._alarm_not_found(alarm_id))

        updates: Dict[str, Any] = {}
        for name, value in changes.changed_fields().items():
            error = _ALARM_FIELD_VALIDATORS[name](value)
            if error is not None:
                return err(error)
            if name == "description":
                value = _trim(value) or None
            elif name == "related_parts":
                value = [part.strip() for part in value]
            updates[name] = _trim(value)

        if not updates:
            return ok(self.maintenance_alarms[index])

        now = utcnow()
        current = self.maintenance_alarms[index]
        updated = MaintenanceAlarm.model_validate({**current.model_dump(), **updates, "updated_at": now})
        self.maintenance_alarms[index] = updated
        self._touch(now)
        return ok(updated)

    def reset_maintenance_alarm(self, alarm_id: str) -> Result[MaintenanceAlarm]:
        """Manual reset: zero the accumulator only.

        Trigger counters and timestamps are left alone; those belong to the
        automatic trigger path.
        """
        return self.update_maintenance_alarm(alarm_id, MaintenanceAlarmChanges(accumulated_hours=0.0))

    def remove_maintenance_alarm(self, alarm_id: str) -> Result[None]:
        index = self._alarm_index(alarm_id)
        if index is None:
            return err(self._alarm_not_found(alarm_id))
        del self.maintenance_alarms[index]
        self._touch()
        return ok()

    def _alarm_index(self, alarm_id: str) -> Optional[int]:
        for index, alarm in enumerate(self.maintenance_alarms):
            if alarm.id == alarm_id:
                return index
        return None

    def _alarm_not_found(self, alarm_id: str) -> DomainError:
        return DomainError.not_found(
            f"Maintenance alarm with ID {alarm_id} not found in machine",
            {"machine_id": str(self.machine_id), "alarm_id": alarm_id},
        )

    def _touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or utcnow()

    # Identity and serialization

    def log_info(self) -> str:
        return f"Machine({self.machine_id}, {self.display_name}, {self.serial_number.masked()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Machine):
            return False
        return self.machine_id == other.machine_id

    def __hash__(self) -> int:
        return hash((Machine, self.machine_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "machine_id": str(self.machine_id),
            "serial_number": str(self.serial_number),
            "brand": self.brand,
            "model": self.model,
            "nickname": self.nickname,
            "machine_type_id": str(self.machine_type_id),
            "owner_id": str(self.owner_id),
            "created_by_id": str(self.created_by_id),
            "status": self.status.value,
            "maintenance_alarms": [alarm.to_dict() for alarm in self.maintenance_alarms],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Machine:
        """Rebuild a stored machine; corrupt data raises InvariantViolationError."""
        return cls(
            machine_id=MachineId(data["machine_id"]),
            serial_number=SerialNumber(data["serial_number"]),
            brand=data["brand"],
            model=data["model"],
            nickname=data.get("nickname"),
            machine_type_id=MachineTypeId(data["machine_type_id"]),
            owner_id=UserId(data["owner_id"]),
            created_by_id=UserId(data["created_by_id"]),
            status=MachineStatus(data["status"]),
            maintenance_alarms=[
                MaintenanceAlarm.from_dict(alarm) for alarm in data.get("maintenance_alarms", [])
            ],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
            version=data.get("version", 0),
        )
