"""Main application configuration schema."""

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from .access_schema import AccessConfig
from .logging_schema import LoggingConfig
from .storage_schema import StorageConfig


class AppConfig(BaseModel):
    """Application configuration."""

    environment: str = Field("development", description="Environment")
    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
    storage: StorageConfig = Field(default_factory=lambda: StorageConfig())
    access: AccessConfig = Field(default_factory=lambda: AccessConfig())

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """
        Validate environment.

        Args:
            v: Value to validate

        Returns:
            Validated value

        Raises:
            ValueError: If environment is invalid
        """
        valid_environments = ["development", "testing", "staging", "production"]
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of {valid_environments}")
        return v


def validate_config(config: Dict[str, Any]) -> AppConfig:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Returns:
        Validated configuration

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    return AppConfig.model_validate(config)
