"""
Request pool: lifecycle, reverse matching, view tracking and analytics.
"""

from rentpool.pool.analytics import AnalyticsAggregator
from rentpool.pool.lifecycle import PoolLifecycleManager, compute_expiration
from rentpool.pool.reverse import REVERSE_NOTIFICATION_TITLE, ReverseMatcher
from rentpool.pool.service import RequestPoolService, create_pool_service
from rentpool.pool.views import ViewTracker

__all__ = [
    "AnalyticsAggregator",
    "PoolLifecycleManager",
    "compute_expiration",
    "ReverseMatcher",
    "REVERSE_NOTIFICATION_TITLE",
    "ViewTracker",
    "RequestPoolService",
    "create_pool_service",
]
