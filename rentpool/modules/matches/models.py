"""
Match Models.

Property-anchored matches between landlord organizations and rental requests.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentpool.utils.dates import as_utc_datetime
from rentpool.utils.text import parse_money


class MatchStatus(str, Enum):
    """Match state from the landlord's side."""

    ACTIVE = "ACTIVE"
    DECLINED = "DECLINED"


class MatchCreate(BaseModel):
    """Match row to insert; the property anchor is mandatory."""

    model_config = ConfigDict(populate_by_name=True)

    organization_id: str = Field(alias="organizationId")
    rental_request_id: int = Field(alias="rentalRequestId")
    property_id: str = Field(alias="propertyId")
    match_score: int = Field(ge=0, le=100, alias="matchScore")
    match_reason: str = Field(default="", alias="matchReason")
    status: MatchStatus = MatchStatus.ACTIVE
    is_viewed: bool = Field(default=False, alias="isViewed")
    is_responded: bool = Field(default=False, alias="isResponded")

    @property
    def key(self) -> tuple[str, int, str]:
        """Uniqueness triple (organization, request, property)."""
        return (self.organization_id, self.rental_request_id, self.property_id)


class LandlordRequestMatch(MatchCreate):
    """Stored match."""

    id: Optional[int] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_timestamps(cls, v: Any) -> Optional[datetime]:
        """Normalize timestamps to aware UTC."""
        return as_utc_datetime(v)


class InboxItem(BaseModel):
    """Matched request as shown in an organization's inbox."""

    match_id: int
    organization_id: str
    match_score: int
    match_reason: Optional[str] = None
    is_viewed: bool = False
    matched_at: Optional[datetime] = None

    # Request
    rental_request_id: int
    title: Optional[str] = None
    location: Optional[str] = None
    budget: Optional[float] = None
    budget_from: Optional[float] = None
    budget_to: Optional[float] = None
    move_in_date: Optional[datetime] = None
    tenant_name: Optional[str] = None
    expires_at: Optional[datetime] = None

    # Anchored property
    property_id: str
    property_name: Optional[str] = None
    property_city: Optional[str] = None
    property_rent: Optional[float] = None

    @field_validator("budget", "budget_from", "budget_to", "property_rent", mode="before")
    @classmethod
    def parse_amounts(cls, v: Any) -> Optional[float]:
        """asyncpg returns NUMERIC as Decimal."""
        return parse_money(v)

    @field_validator("matched_at", "move_in_date", "expires_at", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Optional[datetime]:
        """Normalize dates to aware UTC."""
        return as_utc_datetime(v)


class Pagination(BaseModel):
    """Page position within a result set."""

    page: int
    limit: int
    total: int
    pages: int


class InboxPage(BaseModel):
    """One page of an organization inbox."""

    items: list[InboxItem] = Field(default_factory=list)
    pagination: Pagination
