"""
Analytics Models.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class RequestPoolAnalytics(BaseModel):
    """Daily per-location pool snapshot."""

    location: str
    date_bucket: datetime = Field(description="UTC midnight of the snapshot day")
    total_requests: int = 0
    active_requests: int = 0
    matched_requests: int = 0
    expired_requests: int = 0


class PoolStats(BaseModel):
    """Pool-wide statistics."""

    active_requests: int
    available_organizations: int
    recent_matches: int = Field(description="Matches created in the last 24 hours")
    timestamp: datetime
