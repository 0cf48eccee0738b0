"""Machine repository adapters."""

from .exceptions import DataCorruptionError, PersistenceError, StorageError
from .in_memory_machine_repository import InMemoryMachineRepository
from .json_machine_repository import JSONMachineRepository
from .repository_factory import RepositoryFactory

__all__ = [
    "InMemoryMachineRepository",
    "JSONMachineRepository",
    "RepositoryFactory",
    "PersistenceError",
    "StorageError",
    "DataCorruptionError",
]
