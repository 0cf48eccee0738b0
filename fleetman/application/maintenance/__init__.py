"""Maintenance alarm use cases."""

from .use_cases import (
    CreateMaintenanceAlarm,
    DeleteMaintenanceAlarm,
    ListMaintenanceAlarms,
    ResetMaintenanceAlarm,
    UpdateMaintenanceAlarm,
)

__all__ = [
    "CreateMaintenanceAlarm",
    "ListMaintenanceAlarms",
    "ResetMaintenanceAlarm",
    "UpdateMaintenanceAlarm",
    "DeleteMaintenanceAlarm",
]
