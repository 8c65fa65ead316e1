"""Modules package - Domain modules with repository pattern."""

from rentpool.modules.analytics import (
    AnalyticsRepository,
    PoolStats,
    RequestPoolAnalytics,
)
from rentpool.modules.matches import (
    InboxItem,
    LandlordRequestMatch,
    MatchCreate,
    MatchRepository,
    MatchStatus,
)
from rentpool.modules.notifications import NotificationItem, NotificationRepository
from rentpool.modules.organizations import (
    Organization,
    OrganizationMember,
    OrganizationRepository,
)
from rentpool.modules.properties import (
    Property,
    PropertyCreate,
    PropertyQuery,
    PropertyRepository,
    PropertyStatus,
)
from rentpool.modules.requests import (
    PoolStatus,
    RentalRequest,
    RentalRequestCreate,
    RentalRequestRepository,
)
from rentpool.modules.trust import (
    TrustLevel,
    TrustLevelRepository,
    TrustLevelResult,
    classify_landlord_trust,
)

__all__ = [
    # Requests
    "PoolStatus",
    "RentalRequest",
    "RentalRequestCreate",
    "RentalRequestRepository",
    # Properties
    "Property",
    "PropertyCreate",
    "PropertyQuery",
    "PropertyStatus",
    "PropertyRepository",
    # Organizations
    "Organization",
    "OrganizationMember",
    "OrganizationRepository",
    # Matches
    "InboxItem",
    "LandlordRequestMatch",
    "MatchCreate",
    "MatchStatus",
    "MatchRepository",
    # Analytics
    "PoolStats",
    "RequestPoolAnalytics",
    "AnalyticsRepository",
    # Notifications
    "NotificationItem",
    "NotificationRepository",
    # Trust
    "TrustLevel",
    "TrustLevelResult",
    "classify_landlord_trust",
    "TrustLevelRepository",
]
