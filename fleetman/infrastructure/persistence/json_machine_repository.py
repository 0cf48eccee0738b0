# fleetman/infrastructure/persistence/json_machine_repository.py
import fcntl
import json
import os
import stat
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fleetman.domain.core.exceptions import InvariantViolationError
from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.domain.machine.value_objects import MachineId
from fleetman.infrastructure.logging.logger import get_logger
from fleetman.infrastructure.persistence.exceptions import DataCorruptionError, StorageError

COLLECTION_NAME = "machines"
# Mode of a storage file created by the first write; later writes keep the current mode.
NEW_FILE_MODE = 0o644


class JSONMachineRepository(MachineRepository):
    """
    JSON file implementation of the machine repository.

    Storage structure:
    {
        "machines": {
            "machine_ab12...": { machine_data },
            "machine_cd34...": { machine_data }
        }
    }

    Compound operations hold an exclusive ``fcntl`` lock on a sibling
    ``.lock`` file, so the version check and the write are atomic across
    processes sharing the same file. Writes go through a temporary file and
    ``os.replace``.
    """

    def __init__(self, storage_path: str):
        """
        Initialize JSON repository.

        Args:
            storage_path: Path to JSON storage file

        Raises:
            StorageError: If the storage file cannot be created
        """
        super().__init__()
        self._storage_path = storage_path
        self._lock_path = f"{storage_path}.lock"
        self._depth = 0
        self._logger = get_logger(__name__)

        self._ensure_storage()

    @property
    def storage_path(self) -> str:
        return self._storage_path

    def _ensure_storage(self) -> None:
        try:
            directory = os.path.dirname(self._storage_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            if not os.path.exists(self._storage_path):
                with self._transaction():
                    if not os.path.exists(self._storage_path):
                        self._write({COLLECTION_NAME: {}})
                        self._logger.info("Created machine storage file", path=self._storage_path)
        except OSError as e:
            raise StorageError(f"Failed to initialize storage at {self._storage_path}: {e}") from e

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                # Nested call from the same thread already holds the file lock
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            try:
                lock_file = open(self._lock_path, "a")
            except OSError as e:
                raise StorageError(f"Failed to open lock file {self._lock_path}: {e}") from e

            with lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                self._depth = 1
                try:
                    yield
                finally:
                    self._depth = 0
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self._storage_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DataCorruptionError(f"Invalid JSON in {self._storage_path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {self._storage_path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get(COLLECTION_NAME, {}), dict):
            raise DataCorruptionError(f"Unexpected storage structure in {self._storage_path}")
        data.setdefault(COLLECTION_NAME, {})
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self._storage_path) or "."
        try:
            mode = stat.S_IMODE(os.stat(self._storage_path).st_mode)
        except FileNotFoundError:
            mode = NEW_FILE_MODE
        except OSError as e:
            raise StorageError(f"Failed to stat {self._storage_path}: {e}") from e
        try:
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".machines-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(data, f, indent=2)
                os.chmod(temp_path, mode)
                os.replace(temp_path, self._storage_path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._storage_path}: {e}") from e

    @staticmethod
    def _decode(machine_id: str, record: Dict[str, Any]) -> Machine:
        try:
            return Machine.from_dict(record)
        except (KeyError, TypeError, ValueError, InvariantViolationError) as e:
            raise DataCorruptionError(f"Stored machine {machine_id} is invalid: {e}") from e

    def _load(self, machine_id: MachineId) -> Optional[Machine]:
        record = self._read()[COLLECTION_NAME].get(str(machine_id))
        return self._decode(str(machine_id), record) if record is not None else None

    def _store(self, machine: Machine) -> None:
        data = self._read()
        data[COLLECTION_NAME][str(machine.machine_id)] = machine.to_dict()
        self._write(data)
        self._logger.debug("Stored machine", machine_id=str(machine.machine_id), version=machine.version)

    def _remove(self, machine_id: MachineId) -> bool:
        data = self._read()
        if data[COLLECTION_NAME].pop(str(machine_id), None) is None:
            return False
        self._write(data)
        self._logger.debug("Removed machine", machine_id=str(machine_id))
        return True

    def _all(self) -> List[Machine]:
        return [
            self._decode(machine_id, record)
            for machine_id, record in self._read()[COLLECTION_NAME].items()
        ]
