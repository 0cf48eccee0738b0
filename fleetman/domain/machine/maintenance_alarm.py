"""Maintenance alarm - child entity of the Machine aggregate.

An alarm tracks operating hours accumulated since its last reset against a
configured interval. Alarms have no lifecycle outside their machine: they are
created, edited, reset and removed only through ``Machine``.
"""
from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fleetman.domain.base.entity import Entity
from fleetman.domain.base.result import DomainError, DomainErrorCode

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class MaintenanceAlarm(Entity):
    """Maintenance alarm state.

    Field constraints mirror the domain invariants; breaking them on
    construction or assignment raises ``pydantic.ValidationError``.
    """

    id: str = Field(default_factory=lambda: f"alarm_{uuid.uuid4().hex}")
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    related_parts: List[str] = Field(default_factory=list)
    interval_hours: float = Field(gt=0, allow_inf_nan=False)
    accumulated_hours: float = Field(0.0, ge=0, allow_inf_nan=False)
    is_active: bool = True
    times_triggered: int = Field(0, ge=0)
    last_triggered_at: Optional[datetime] = None
    created_by: str

    @property
    def remaining_hours(self) -> float:
        """Hours left before the interval is reached (never negative)."""
        return max(self.interval_hours - self.accumulated_hours, 0.0)

    @property
    def is_due(self) -> bool:
        return self.is_active and self.accumulated_hours >= self.interval_hours

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MaintenanceAlarm:
        return cls.model_validate(data)


class NewMaintenanceAlarm(BaseModel):
    """Caller-supplied properties for a new alarm.

    Counters and flags managed by the system are not part of this model; any
    such keys in the input are ignored.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    description: Optional[str] = None
    related_parts: List[str] = Field(default_factory=list)
    interval_hours: float
    created_by: str


class MaintenanceAlarmChanges(BaseModel):
    """Sparse set of alarm fields to change.

    Only fields explicitly set are applied; see ``changed_fields``.
    ``accumulated_hours`` is system-managed and only written by reset paths.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    related_parts: Optional[List[str]] = None
    interval_hours: Optional[float] = None
    is_active: Optional[bool] = None
    accumulated_hours: Optional[float] = None

    def changed_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    def is_empty(self) -> bool:
        return not self.model_fields_set


def validate_title(title: Any) -> Optional[DomainError]:
    if not isinstance(title, str) or not title.strip():
        return DomainError.validation("Alarm title is required")
    if len(title.strip()) > TITLE_MAX_LENGTH:
        return DomainError.validation(f"Alarm title cannot exceed {TITLE_MAX_LENGTH} characters")
    return None


def validate_description(description: Any) -> Optional[DomainError]:
    if description is None:
        return None
    if not isinstance(description, str):
        return DomainError.validation("Alarm description must be text")
    if len(description.strip()) > DESCRIPTION_MAX_LENGTH:
        return DomainError.validation(
            f"Alarm description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
        )
    return None


def validate_related_parts(parts: Any) -> Optional[DomainError]:
    if not isinstance(parts, list) or not all(isinstance(p, str) and p.strip() for p in parts):
        return DomainError.validation("All related parts must be non-empty strings")
    return None


def validate_interval_hours(hours: Any) -> Optional[DomainError]:
    if isinstance(hours, bool) or not isinstance(hours, (int, float)) \
            or not math.isfinite(hours) or hours <= 0:
        return DomainError.create(
            DomainErrorCode.INVALID_MAINTENANCE_INTERVAL,
            "Interval hours must be greater than 0",
            {"interval_hours": hours},
        )
    return None


def validate_accumulated_hours(hours: Any) -> Optional[DomainError]:
    if isinstance(hours, bool) or not isinstance(hours, (int, float)) \
            or not math.isfinite(hours) or hours < 0:
        return DomainError.validation("Accumulated hours cannot be negative")
    return None
