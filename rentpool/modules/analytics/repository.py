"""
Analytics Repository.

Data access layer for request pool analytics snapshots.
"""

from asyncpg import Pool

from rentpool.modules.analytics.models import RequestPoolAnalytics


class AnalyticsRepository:
    """Repository for pool analytics database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def upsert(self, snapshot: RequestPoolAnalytics) -> None:
        """
        Write the snapshot for its (location, date_bucket), replacing counts.

        Args:
            snapshot: Counts for one location and day
        """
        query = """
        INSERT INTO request_pool_analytics (
            location, date_bucket,
            total_requests, active_requests, matched_requests, expired_requests
        ) VALUES ($1, $2, $3, $4, $5, $6)
        ON CONFLICT (location, date_bucket) DO UPDATE SET
            total_requests = EXCLUDED.total_requests,
            active_requests = EXCLUDED.active_requests,
            matched_requests = EXCLUDED.matched_requests,
            expired_requests = EXCLUDED.expired_requests
        """
        async with self._pool.acquire() as conn:
            await conn.execute(
                query,
                snapshot.location,
                snapshot.date_bucket,
                snapshot.total_requests,
                snapshot.active_requests,
                snapshot.matched_requests,
                snapshot.expired_requests,
            )
