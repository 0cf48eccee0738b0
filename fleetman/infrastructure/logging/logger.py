import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from fleetman.config.schemas import LoggingConfig

LOG_FORMAT = "%(message)s"

_SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def setup_logging(config: Optional["LoggingConfig"] = None) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the application using structlog.

    Args:
        config: Logging section of the application configuration.
                If None, logs at INFO to stdout.
    Returns:
        Configured structlog logger instance.
    """
    if config is None:
        from fleetman.config.schemas import LoggingConfig
        config = LoggingConfig()

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=_SHARED_PROCESSORS,
    )

    # Configure handlers
    handlers = []

    if config.destination in ("file", "both"):
        log_path = os.path.expandvars(config.file_path)
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if config.destination in ("stdout", "both"):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # Remove any existing handlers and add new ones
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    # Configure structlog
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level]
        + _SHARED_PROCESSORS
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = get_logger("fleetman")
    logger.debug(
        "Logging configured",
        log_level=config.level,
        log_destination=config.destination,
        log_file=config.file_path if config.destination != "stdout" else None,
    )
    return logger


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
