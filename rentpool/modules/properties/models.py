"""
Property Models.

Pydantic models for landlord properties and candidate queries.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentpool.modules.organizations.models import Organization
from rentpool.utils.dates import as_utc_datetime
from rentpool.utils.text import as_int, parse_money


class PropertyStatus(str, Enum):
    """Listing status of a property."""

    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"


class PropertyBase(BaseModel):
    """Fields shared by stored properties and creation payloads."""

    model_config = ConfigDict(populate_by_name=True)

    organization_id: str = Field(alias="organizationId")
    name: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    monthly_rent: Optional[float] = Field(default=None, alias="monthlyRent")
    property_type: Optional[str] = Field(default=None, alias="propertyType")
    bedrooms: Optional[int] = None
    furnished: Optional[bool] = None
    parking: Optional[bool] = None
    pets_allowed: Optional[bool] = Field(default=None, alias="petsAllowed")
    available_from: Optional[datetime] = Field(default=None, alias="availableFrom")

    @field_validator("monthly_rent", mode="before")
    @classmethod
    def parse_rent(cls, v: Any) -> Optional[float]:
        """Parse rent, handling Decimal and formatted strings."""
        return parse_money(v)

    @field_validator("bedrooms", mode="before")
    @classmethod
    def parse_bedrooms(cls, v: Any) -> Optional[int]:
        """Coerce bedrooms to int."""
        return as_int(v)

    @field_validator("available_from", mode="before")
    @classmethod
    def parse_available_from(cls, v: Any) -> Optional[datetime]:
        """Normalize availability date to aware UTC."""
        return as_utc_datetime(v)


class PropertyCreate(PropertyBase):
    """Model for listing a new property."""

    status: PropertyStatus = PropertyStatus.AVAILABLE
    availability: bool = True


class Property(PropertyBase):
    """Stored property."""

    id: str
    status: PropertyStatus = PropertyStatus.AVAILABLE
    availability: bool = True
    organization: Optional[Organization] = None

    @property
    def is_listable(self) -> bool:
        """Whether the property can be offered to tenants right now."""
        return self.status is PropertyStatus.AVAILABLE and self.availability is True

    @classmethod
    def from_row(cls, row: dict) -> "Property":
        """
        Build a property from a row joined with its organization.

        Joined columns are expected as organization_name and
        organization_is_personal.
        """
        data = dict(row)
        org_name = data.pop("organization_name", None)
        org_personal = data.pop("organization_is_personal", None)
        if data.get("organization_id") is not None and org_personal is not None:
            data["organization"] = Organization(
                id=data["organization_id"],
                name=org_name,
                is_personal=bool(org_personal),
            )
        return cls.model_validate(data)


class PropertyQuery(BaseModel):
    """Criteria for fetching candidate properties."""

    city_patterns: list[str] = Field(default_factory=list, description="ILIKE substring patterns")
    exact_cities: list[str] = Field(default_factory=list, description="Exact city names")
    max_rent: Optional[float] = None
    min_rent: Optional[float] = None
    available_before: Optional[datetime] = None
    limit: int = 200

    @property
    def has_city_filter(self) -> bool:
        """Whether any city constraint applies."""
        return bool(self.city_patterns or self.exact_cities)
