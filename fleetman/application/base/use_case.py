"""
Base class for application use cases.

Use cases take primitives, validate them through value objects, talk to the
``MachineRepository`` port and return a ``Result``. This module owns the
cross-cutting behavior they share: structured logging of every attempt and
translation of escaped exceptions into ``Err`` values.
"""
from abc import ABC
from typing import Any, Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from fleetman.domain.base.result import DomainError, Result, err, ok
from fleetman.domain.core.exceptions import RepositoryError
from fleetman.domain.machine.machine_repository import MachineRepository
from fleetman.domain.machine.value_objects import MachineId
from fleetman.infrastructure.logging.logger import get_logger

M = TypeVar("M", bound=BaseModel)


class UseCase(ABC):
    """
    Root base class with common cross-cutting concerns.

    Subclasses set ``operation`` to a short human-readable name (for example
    ``"Create maintenance alarm"``) and wrap their body in ``_run``.
    """

    operation: str = "Execute use case"

    def __init__(self, repository: MachineRepository, logger: Optional[Any] = None):
        self._repository = repository
        self._logger = logger or get_logger(self.__class__.__module__)

    def _run(self, body: Callable[[], Result], **context: Any) -> Result:
        """
        Execute ``body`` with logging and fault translation.

        Args:
            body: Callable producing the use case's Result
            context: Identifiers to attach to every log line

        Returns:
            The body's Result, or an Err if the body raised
        """
        self._logger.info(f"{self.operation} started", **context)
        try:
            result = body()
        except RepositoryError as e:
            self._logger.exception(f"{self.operation} failed", storage_error=str(e), **context)
            return err(DomainError.internal(f"Failed to {self.operation.lower()}"))
        except Exception:
            self._logger.exception(f"{self.operation} failed", **context)
            return err(DomainError.internal(f"Failed to {self.operation.lower()}"))

        if result.is_ok():
            self._logger.info(f"{self.operation} succeeded", **context)
        else:
            error = result.unwrap_err()
            self._logger.warning(
                f"{self.operation} failed",
                error_code=error.code,
                error_message=error.message,
                **context,
            )
        return result

    @staticmethod
    def _parse_machine_id(raw: Any) -> Result[MachineId]:
        return MachineId.create(raw)

    @staticmethod
    def _build(model_cls: Type[M], **data: Any) -> Result[M]:
        """Build an input model, reporting malformed input as VALIDATION_ERROR."""
        try:
            return ok(model_cls(**data))
        except ValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(part) for part in first["loc"]) or model_cls.__name__
            return err(DomainError.validation(
                f"Invalid {field_name}: {first['msg']}",
                {"fields": [".".join(str(part) for part in error["loc"]) for error in e.errors()]},
            ))
