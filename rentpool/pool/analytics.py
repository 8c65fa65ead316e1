"""
Pool analytics aggregation.

Per-location daily snapshots and pool-wide statistics.
"""

import asyncio
from datetime import timedelta

from loguru import logger

from rentpool.modules.analytics.models import PoolStats, RequestPoolAnalytics
from rentpool.modules.analytics.repository import AnalyticsRepository
from rentpool.modules.matches.repository import MatchRepository
from rentpool.modules.properties.repository import PropertyRepository
from rentpool.modules.requests.repository import RentalRequestRepository
from rentpool.utils.dates import day_bucket, utcnow

analytics_log = logger.bind(module="Analytics")


class AnalyticsAggregator:
    """Maintains request pool analytics."""

    def __init__(
        self,
        request_repo: RentalRequestRepository,
        property_repo: PropertyRepository,
        match_repo: MatchRepository,
        analytics_repo: AnalyticsRepository,
    ):
        self._requests = request_repo
        self._properties = property_repo
        self._matches = match_repo
        self._analytics = analytics_repo

    async def update_pool_analytics(self, location: str) -> None:
        """
        Recount a location and upsert today's snapshot.

        Errors are logged, never raised.

        Args:
            location: Exact request location
        """
        try:
            counts = await self._requests.count_by_location(location)
            snapshot = RequestPoolAnalytics(
                location=location,
                date_bucket=day_bucket(),
                total_requests=counts["total"],
                active_requests=counts["active"],
                matched_requests=counts["matched"],
                expired_requests=counts["expired"],
            )
            await self._analytics.upsert(snapshot)
            analytics_log.debug(
                f"Analytics for {location}: {snapshot.active_requests} active "
                f"of {snapshot.total_requests}"
            )
        except Exception as e:
            analytics_log.error(f"Failed to update pool analytics for {location}: {e}")

    async def get_pool_stats(self) -> PoolStats | None:
        """
        Get pool-wide statistics.

        Returns:
            PoolStats, or None when the counts cannot be read
        """
        try:
            now = utcnow()
            active, organizations, recent = await asyncio.gather(
                self._requests.count_active(),
                self._properties.count_available_organizations(),
                self._matches.count_since(now - timedelta(hours=24)),
            )
            return PoolStats(
                active_requests=active,
                available_organizations=organizations,
                recent_matches=recent,
                timestamp=now,
            )
        except Exception as e:
            analytics_log.error(f"Failed to get pool stats: {e}")
            return None
