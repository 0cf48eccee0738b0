# fleetman/infrastructure/persistence/repository_factory.py
import os

from fleetman.config.schemas import StorageConfig
from fleetman.domain.core.exceptions import ConfigurationError
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.infrastructure.logging.logger import get_logger
from fleetman.infrastructure.persistence.exceptions import StorageError
from fleetman.infrastructure.persistence.in_memory_machine_repository import InMemoryMachineRepository
from fleetman.infrastructure.persistence.json_machine_repository import JSONMachineRepository

logger = get_logger(__name__)


class RepositoryFactory:
    """
    Factory for creating machine repository instances based on configuration.

    Keeps storage selection and setup in the infrastructure layer so the
    application layer only ever sees the ``MachineRepository`` port.
    """

    @staticmethod
    def create_machine_repository(config: StorageConfig) -> MachineRepository:
        """
        Create a machine repository from storage configuration.

        Args:
            config: Storage section of the application configuration

        Returns:
            MachineRepository: Configured repository instance

        Raises:
            ConfigurationError: If the storage type is unsupported or the
                storage cannot be initialized
        """
        if config.type == "memory":
            logger.info("Using in-memory machine storage")
            return InMemoryMachineRepository()

        if config.type == "json":
            storage_path = os.path.expandvars(config.json_path)
            try:
                repository = JSONMachineRepository(storage_path=storage_path)
            except StorageError as e:
                raise ConfigurationError(f"Failed to create repository: {e}") from e
            logger.info("Using JSON machine storage", path=storage_path)
            return repository

        raise ConfigurationError(f"Unsupported repository type: {config.type}")
