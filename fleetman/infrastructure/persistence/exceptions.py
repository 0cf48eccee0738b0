# fleetman/infrastructure/persistence/exceptions.py
from fleetman.domain.core.exceptions import RepositoryError


class PersistenceError(RepositoryError):
    """Base exception for persistence-related errors."""
    pass


class StorageError(PersistenceError):
    """Raised when there's an error with storage operations."""
    pass


class DataCorruptionError(StorageError):
    """Raised when stored data cannot be decoded back into a machine."""
    pass
