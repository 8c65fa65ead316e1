"""
Rental Request Models.

Pydantic models for tenant rental requests and their pool status.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentpool.utils.dates import as_utc_datetime
from rentpool.utils.text import as_int, parse_money


class PoolStatus(str, Enum):
    """Pool lifecycle state of a rental request."""

    ACTIVE = "ACTIVE"
    MATCHED = "MATCHED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        """Terminal states have no transition out within the pool."""
        return self is not PoolStatus.ACTIVE


class RentalRequestBase(BaseModel):
    """Fields shared by stored requests and creation payloads."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    location: str = ""

    # Budget (locale-formatted text accepted)
    budget: Optional[float] = None
    budget_from: Optional[float] = Field(default=None, alias="budgetFrom")
    budget_to: Optional[float] = Field(default=None, alias="budgetTo")

    move_in_date: Optional[datetime] = Field(default=None, alias="moveInDate")
    property_type: Optional[str] = Field(default=None, alias="propertyType")
    bedrooms: Optional[int] = None

    # Amenity preferences (None = no preference)
    furnished: Optional[bool] = None
    parking: Optional[bool] = None
    pets_allowed: Optional[bool] = Field(default=None, alias="petsAllowed")

    tenant_name: Optional[str] = Field(default=None, alias="tenantName")

    @field_validator("budget", "budget_from", "budget_to", mode="before")
    @classmethod
    def parse_budget(cls, v: Any) -> Optional[float]:
        """Parse budget values, handling EU/US separators and currency text."""
        return parse_money(v)

    @field_validator("bedrooms", mode="before")
    @classmethod
    def parse_bedrooms(cls, v: Any) -> Optional[int]:
        """Coerce bedrooms to int, dropping unparseable values."""
        return as_int(v)

    @field_validator("move_in_date", mode="before")
    @classmethod
    def parse_move_in(cls, v: Any) -> Optional[datetime]:
        """Parse move-in date; invalid dates become None."""
        return as_utc_datetime(v)

    @property
    def max_budget(self) -> Optional[float]:
        """Upper budget bound (budget_to, falling back to budget)."""
        return self.budget_to if self.budget_to is not None else self.budget

    @property
    def min_budget(self) -> Optional[float]:
        """Lower budget bound."""
        return self.budget_from

    @property
    def has_budget(self) -> bool:
        """Whether any budget field is set."""
        return any(v is not None for v in (self.budget, self.budget_from, self.budget_to))


class RentalRequestCreate(RentalRequestBase):
    """Model for creating a rental request."""

    tenant_id: Optional[str] = Field(default=None, alias="tenantId")


class RentalRequest(RentalRequestBase):
    """Stored rental request."""

    id: int
    tenant_id: Optional[str] = Field(default=None, alias="tenantId")
    pool_status: PoolStatus = Field(default=PoolStatus.ACTIVE, alias="poolStatus")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    view_count: int = Field(default=0, alias="viewCount")
    response_count: int = Field(default=0, alias="responseCount")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("expires_at", "created_at", mode="before")
    @classmethod
    def parse_timestamps(cls, v: Any) -> Optional[datetime]:
        """Normalize timestamps to aware UTC."""
        return as_utc_datetime(v)

    def __str__(self) -> str:
        """String representation for log output."""
        return f"[{self.id}] {self.title or 'untitled'} ({self.location or 'N/A'})"
