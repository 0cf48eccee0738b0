"""Machine-specific value objects orchestrator.

This module provides a unified interface to all machine value objects organized by category:
- Machine status (MachineStatus)
- Machine identifiers (MachineId, MachineTypeId, UserId)
- Serial numbers (SerialNumber)
"""

# Import all value objects from specialized modules
from .machine_status import MachineStatus

from .machine_identifiers import Identifier, MachineId, MachineTypeId, UserId

from .serial_number import SerialNumber

# Export all value objects
__all__ = [
    # Machine status
    "MachineStatus",
    # Machine identifiers
    "Identifier",
    "MachineId",
    "MachineTypeId",
    "UserId",
    # Serial numbers
    "SerialNumber",
]
