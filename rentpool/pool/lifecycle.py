"""
Request pool lifecycle.

Admits requests into the pool, runs immediate matching, removes requests on
terminal transitions and expires stale ones.
"""

from datetime import datetime, timedelta

from loguru import logger

from rentpool.connections.redis import RedisConnection
from rentpool.matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from rentpool.matching.discovery import CandidateDiscovery
from rentpool.matching.persistence import MatchPersistence
from rentpool.matching.ranking import rank_candidates
from rentpool.matching.scoring import ScoringEngine
from rentpool.modules.matches.repository import MatchRepository
from rentpool.modules.requests.models import PoolStatus, RentalRequest
from rentpool.modules.requests.repository import RentalRequestRepository
from rentpool.pool.analytics import AnalyticsAggregator
from rentpool.utils.dates import utcnow
from rentpool.utils.resilience import best_effort

pool_log = logger.bind(module="Pool")


def compute_expiration(
    move_in_date: datetime | None,
    now: datetime | None = None,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> datetime:
    """
    Pool expiration for a request.

    Three days before move-in, but never sooner than 24 hours from now.
    Without a move-in date the request stays 14 days.

    Args:
        move_in_date: Requested move-in date
        now: Reference time (default: current UTC time)
        config: Expiration policy

    Returns:
        Expiration timestamp
    """
    now = now or utcnow()
    if move_in_date is None:
        return now + timedelta(days=config.default_expiry_days)
    return max(
        move_in_date - timedelta(days=config.expiry_lead_days),
        now + timedelta(hours=config.expiry_grace_hours),
    )


class PoolLifecycleManager:
    """Owns the ACTIVE -> MATCHED/EXPIRED/CANCELLED transitions."""

    def __init__(
        self,
        request_repo: RentalRequestRepository,
        match_repo: MatchRepository,
        discovery: CandidateDiscovery,
        scoring: ScoringEngine,
        persistence: MatchPersistence,
        analytics: AnalyticsAggregator,
        cache: RedisConnection | None = None,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    ):
        self._requests = request_repo
        self._matches = match_repo
        self._discovery = discovery
        self._scoring = scoring
        self._persistence = persistence
        self._analytics = analytics
        self._cache = cache
        self._config = config

    # ========== Admission ==========

    async def add_to_pool(self, rental_request: RentalRequest) -> int:
        """
        Admit a request into the pool and match it right away.

        The admission write propagates errors. Matching failures are logged
        and reported as zero matches; the request stays admitted.

        Args:
            rental_request: Stored rental request

        Returns:
            Number of matches created

        Raises:
            ValueError: If the request is missing or already left the pool
        """
        if rental_request.pool_status.is_terminal:
            raise ValueError(
                f"Rental request {rental_request.id} is {rental_request.pool_status.value}, "
                f"cannot re-enter the pool"
            )

        expires_at = compute_expiration(rental_request.move_in_date, config=self._config)
        if not await self._requests.admit(rental_request.id, expires_at):
            raise ValueError(f"Rental request {rental_request.id} not found or no longer pooled")

        pooled = rental_request.model_copy(
            update={"pool_status": PoolStatus.ACTIVE, "expires_at": expires_at}
        )
        pool_log.info(f"Admitted {pooled} until {expires_at.isoformat()}")

        if pooled.location:
            await self._analytics.update_pool_analytics(pooled.location)
        await self._cache_request(pooled)

        try:
            return await self.match_request(pooled)
        except Exception as e:
            pool_log.error(f"Immediate matching failed for request {pooled.id}: {e}")
            return 0

    async def match_request(self, rental_request: RentalRequest) -> int:
        """
        Discover, score, rank and persist matches for one request.

        Args:
            rental_request: Pooled rental request

        Returns:
            Number of matches created
        """
        candidates = await self._discovery.find_candidates(rental_request)
        if not candidates:
            pool_log.info(f"No candidates for request {rental_request.id}")
            return 0

        scored = await self._scoring.score_candidates(candidates, rental_request)
        ranked = rank_candidates(scored, rental_request, self._config)
        created = await self._persistence.create_matches(
            rental_request.id, ranked, rental_request
        )
        pool_log.info(f"Created {created} matches for request {rental_request.id}")
        return created

    # ========== Removal ==========

    async def remove_from_pool(
        self,
        rental_request_id: int,
        reason: PoolStatus | str = PoolStatus.MATCHED,
    ) -> None:
        """
        Take a request out of the pool and drop its matches.

        Args:
            rental_request_id: Rental request ID
            reason: Terminal status (MATCHED, EXPIRED or CANCELLED)

        Raises:
            ValueError: If reason is not a terminal pool status
        """
        status = PoolStatus(reason)
        if not status.is_terminal:
            raise ValueError(f"Cannot remove request from pool with status {status.value}")

        location = await self._requests.close_in_pool(rental_request_id, status)
        if location is None:
            pool_log.warning(f"Request {rental_request_id} was not ACTIVE in the pool")

        deleted = await self._matches.delete_by_request(rental_request_id)
        pool_log.info(
            f"Removed request {rental_request_id} from pool ({status.value}), "
            f"deleted {deleted} matches"
        )

        await self._clear_cached([rental_request_id])
        if location:
            await self._analytics.update_pool_analytics(location)

    # ========== Expiration ==========

    async def cleanup_expired_requests(self) -> int:
        """
        Expire every ACTIVE request past its expiration.

        Analytics are refreshed once per distinct location. Errors are logged
        and the sweep is retried on the next run.

        Returns:
            Number of requests expired
        """
        try:
            now = utcnow()
            expired = await self._requests.find_expired(now)
            if not expired:
                pool_log.debug("No expired requests")
                return 0

            count = await self._requests.mark_expired(now)
            await self._clear_cached([row["id"] for row in expired])

            locations = list(dict.fromkeys(row["location"] for row in expired if row["location"]))
            for location in locations:
                await self._analytics.update_pool_analytics(location)

            pool_log.info(f"Expired {count} requests across {len(locations)} locations")
            return count
        except Exception as e:
            pool_log.error(f"Expired request cleanup failed: {e}")
            return 0

    # ========== Cache ==========

    @best_effort(fallback=lambda *args, **kwargs: None)
    async def _cache_request(self, rental_request: RentalRequest) -> None:
        if self._cache is not None:
            await self._cache.cache_request(rental_request)

    @best_effort(fallback=lambda *args, **kwargs: None)
    async def _clear_cached(self, rental_request_ids: list[int]) -> None:
        if self._cache is not None:
            await self._cache.clear_requests(rental_request_ids)
