"""Storage configuration schema."""

from pydantic import BaseModel, Field, field_validator, model_validator


class StorageConfig(BaseModel):
    """Machine storage configuration."""

    type: str = Field("memory", description="Storage backend: memory or json")
    json_path: str = Field("data/machines.json", description="JSON storage file path")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate storage type."""
        valid_types = ["memory", "json"]
        if v not in valid_types:
            raise ValueError(f"Storage type must be one of {valid_types}")
        return v

    @model_validator(mode="after")
    def validate_json_path(self) -> "StorageConfig":
        """Ensure JSON storage has a file path."""
        if self.type == "json" and not self.json_path.strip():
            raise ValueError("json_path is required for json storage")
        return self
