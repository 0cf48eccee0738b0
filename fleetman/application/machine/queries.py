"""Machine listing query and its paged result."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetman.domain.machine.machine_aggregate import Machine

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class ListMachinesQuery(BaseModel):
    """Query to list machines with optional filtering and paging."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    owner_id: Optional[str] = None
    machine_type_id: Optional[str] = None
    status: Optional[str] = None
    brand: Optional[str] = None
    search: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, v: int) -> int:
        """Clamp oversized pages to MAX_PAGE_SIZE."""
        return min(v, MAX_PAGE_SIZE)

    @field_validator("owner_id", "machine_type_id", "status", "brand", "search")
    @classmethod
    def blank_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


@dataclass(frozen=True)
class MachinePage:
    items: List[Machine]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0
