"""Access control configuration schema."""

from typing import List

from pydantic import BaseModel, Field, field_validator


class AccessConfig(BaseModel):
    """Machine access configuration."""

    ownership_checked_user_types: List[str] = Field(
        default_factory=lambda: ["CLIENT"],
        description="User types that may only manage machines they own",
    )

    @field_validator("ownership_checked_user_types")
    @classmethod
    def validate_user_types(cls, v: List[str]) -> List[str]:
        """Reject blank user types; matching is exact and case-sensitive."""
        if any(not user_type.strip() for user_type in v):
            raise ValueError("User types cannot be blank")
        return [user_type.strip() for user_type in v]
