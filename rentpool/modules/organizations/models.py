"""
Organization Models.

The landlord-side matching unit and its member users.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentpool.utils.dates import as_utc_datetime


class Organization(BaseModel):
    """Landlord organization (one person or a team)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    is_personal: bool = Field(default=False, alias="isPersonal")


class OrganizationMember(BaseModel):
    """Member user with the fields used for reputation scoring."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    organization_id: Optional[str] = Field(default=None, alias="organizationId")
    average_rating: Optional[float] = Field(default=None, alias="averageRating")
    total_reviews: int = Field(default=0, alias="totalReviews")
    last_active_at: Optional[datetime] = Field(default=None, alias="lastActiveAt")
    is_suspended: bool = Field(default=False, alias="isSuspended")

    @field_validator("last_active_at", mode="before")
    @classmethod
    def parse_last_active(cls, v: Any) -> Optional[datetime]:
        """Normalize last activity to aware UTC."""
        return as_utc_datetime(v)

    @field_validator("total_reviews", mode="before")
    @classmethod
    def parse_total_reviews(cls, v: Any) -> int:
        """Missing review counts mean no reviews."""
        return int(v) if v is not None else 0

    @field_validator("is_suspended", mode="before")
    @classmethod
    def parse_suspended(cls, v: Any) -> bool:
        """Missing suspension flag means not suspended."""
        return bool(v)
