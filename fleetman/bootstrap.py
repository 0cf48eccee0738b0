"""Application bootstrap - wires configuration, logging and use cases."""
from typing import Optional

from fleetman.application.machine import CreateMachine, DeleteMachine, GetMachine, ListMachines, UpdateMachine
from fleetman.application.maintenance import (
    CreateMaintenanceAlarm,
    DeleteMaintenanceAlarm,
    ListMaintenanceAlarms,
    ResetMaintenanceAlarm,
    UpdateMaintenanceAlarm,
)
from fleetman.config.manager import ConfigurationManager
from fleetman.domain.machine.access_policy import MachineAccessPolicy
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.domain.machine.status_policy import StatusTransitionPolicy
from fleetman.infrastructure.logging.logger import get_logger, setup_logging
from fleetman.infrastructure.persistence.repository_factory import RepositoryFactory


class Application:
    """
    Composition root.

    Loads configuration, sets up logging, builds the machine repository and
    exposes every use case as an attribute sharing that repository.
    """

    def __init__(self,
                 config_manager: Optional[ConfigurationManager] = None,
                 repository: Optional[MachineRepository] = None,
                 status_policy: Optional[StatusTransitionPolicy] = None,
                 configure_logging: bool = True):
        self.config_manager = config_manager or ConfigurationManager()
        app_config = self.config_manager.app_config

        if configure_logging:
            setup_logging(app_config.logging)
        self._logger = get_logger(__name__)

        self.repository = repository or RepositoryFactory.create_machine_repository(app_config.storage)
        self.access_policy = MachineAccessPolicy(
            frozenset(app_config.access.ownership_checked_user_types)
        )
        self.status_policy = status_policy or StatusTransitionPolicy()

        # Machine use cases
        self.create_machine = CreateMachine(self.repository)
        self.get_machine = GetMachine(self.repository, self.access_policy)
        self.list_machines = ListMachines(self.repository, self.access_policy)
        self.update_machine = UpdateMachine(self.repository, self.access_policy, self.status_policy)
        self.delete_machine = DeleteMachine(self.repository, self.access_policy)

        # Maintenance alarm use cases
        self.create_maintenance_alarm = CreateMaintenanceAlarm(self.repository)
        self.list_maintenance_alarms = ListMaintenanceAlarms(self.repository)
        self.reset_maintenance_alarm = ResetMaintenanceAlarm(self.repository)
        self.update_maintenance_alarm = UpdateMaintenanceAlarm(self.repository)
        self.delete_maintenance_alarm = DeleteMaintenanceAlarm(self.repository)

        self._logger.info(
            "Application initialized",
            environment=app_config.environment,
            storage_type=app_config.storage.type,
        )
