"""
Notification Models.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationItem(BaseModel):
    """One organization to notify about one rental request."""

    model_config = ConfigDict(populate_by_name=True)

    organization_id: str = Field(alias="organizationId")
    rental_request_id: int = Field(alias="rentalRequestId")
    title: str = Field(default="", description="Rental request title")
    headline: Optional[str] = Field(
        default=None, description="Complete notification title, replacing the default"
    )
    tenant_name: Optional[str] = Field(default=None, alias="tenantName")

    @property
    def notification_title(self) -> str:
        """In-app notification title."""
        if self.headline:
            return self.headline
        return f"New rental request: {self.title}"

    @property
    def notification_body(self) -> str:
        """In-app notification body."""
        return f"{self.tenant_name or 'A tenant'} has a request matching your portfolio."
