"""Organizations module."""

from rentpool.modules.organizations.models import Organization, OrganizationMember
from rentpool.modules.organizations.repository import OrganizationRepository

__all__ = [
    "Organization",
    "OrganizationMember",
    "OrganizationRepository",
]
