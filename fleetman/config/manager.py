"""Configuration management for the application."""
from __future__ import annotations

import json
import os
import threading
from typing import Any, Dict, Optional

from pydantic import ValidationError

from fleetman.config.schemas import AppConfig, LoggingConfig, StorageConfig, AccessConfig
from fleetman.config.utils.env_expansion import expand_env_vars
from fleetman.domain.core.exceptions import ConfigurationError

CONFIG_FILE_ENV = "FLEETMAN_CONFIG_FILE"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "FLEETMAN_LOG_LEVEL": ("logging", "level"),
    "FLEETMAN_STORAGE_TYPE": ("storage", "type"),
    "FLEETMAN_STORAGE_PATH": ("storage", "json_path"),
}


class ConfigurationManager:
    """
    Single source of truth for application configuration.

    Loads an optional JSON file, expands environment references in string
    values, applies ``FLEETMAN_*`` overrides and validates the result into
    ``AppConfig``. Loading is lazy and happens once until ``reload``.
    """

    def __init__(self, config_file: Optional[str] = None,
                 environ: Optional[Dict[str, str]] = None):
        """Initialize configuration manager with lazy loading."""
        self._environ = environ if environ is not None else os.environ
        self._config_file = config_file or self._environ.get(CONFIG_FILE_ENV)
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def config_file(self) -> Optional[str]:
        return self._config_file

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def get_logging_config(self) -> LoggingConfig:
        return self.app_config.logging

    def get_storage_config(self) -> StorageConfig:
        return self.app_config.storage

    def get_access_config(self) -> AccessConfig:
        return self.app_config.access

    def reload(self) -> None:
        """Reload configuration from sources on next access."""
        with self._lock:
            self._app_config = None

    def _load_app_config(self) -> AppConfig:
        config_data = self._load_file() if self._config_file else {}
        config_data = expand_env_vars(config_data, self._environ)
        config_data = self._apply_environment_overrides(config_data)

        try:
            return AppConfig.model_validate(config_data)
        except ValidationError as e:
            invalid_fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            raise ConfigurationError(
                f"Invalid configuration: {e}", missing_fields=invalid_fields
            ) from e

    def _load_file(self) -> Dict[str, Any]:
        try:
            with open(self._config_file, "r") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {self._config_file}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {self._config_file}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file {self._config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {self._config_file} must contain a JSON object")
        return data

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(config_data)
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = self._environ.get(env_var)
            if value is None or value == "":
                continue
            section_data = result.get(section)
            section_data = dict(section_data) if isinstance(section_data, dict) else {}
            section_data[key] = value
            result[section] = section_data
        return result
