"""Configuration schemas package."""

from .access_schema import AccessConfig
from .app_schema import AppConfig, validate_config
from .logging_schema import LoggingConfig
from .storage_schema import StorageConfig

__all__ = [
    "AppConfig",
    "validate_config",
    "LoggingConfig",
    "StorageConfig",
    "AccessConfig",
]
