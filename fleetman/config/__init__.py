"""Application configuration."""

from .manager import ConfigurationManager
from .schemas import AccessConfig, AppConfig, LoggingConfig, StorageConfig

__all__ = [
    "ConfigurationManager",
    "AppConfig",
    "LoggingConfig",
    "StorageConfig",
    "AccessConfig",
]
