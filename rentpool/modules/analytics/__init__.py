"""Analytics module."""

from rentpool.modules.analytics.models import PoolStats, RequestPoolAnalytics
from rentpool.modules.analytics.repository import AnalyticsRepository

__all__ = [
    "PoolStats",
    "RequestPoolAnalytics",
    "AnalyticsRepository",
]
