"""
Request Pool Service.

Public entry point of the matching engine. Wires repositories, matching
components and pool managers together.
"""

import math
from typing import Any

from asyncpg import Pool
from loguru import logger

from config.settings import get_settings
from rentpool.connections.postgres import get_postgres
from rentpool.connections.redis import RedisConnection, get_redis
from rentpool.matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from rentpool.matching.discovery import CandidateDiscovery
from rentpool.matching.persistence import MatchPersistence
from rentpool.matching.scoring import ScoringEngine
from rentpool.modules.analytics.models import PoolStats
from rentpool.modules.analytics.repository import AnalyticsRepository
from rentpool.modules.matches.models import InboxPage, Pagination
from rentpool.modules.matches.repository import MatchRepository
from rentpool.modules.notifications.repository import NotificationRepository
from rentpool.modules.organizations.repository import OrganizationRepository
from rentpool.modules.properties.models import Property, PropertyCreate
from rentpool.modules.properties.repository import PropertyRepository
from rentpool.modules.requests.models import PoolStatus, RentalRequest, RentalRequestCreate
from rentpool.modules.requests.repository import RentalRequestRepository
from rentpool.modules.trust.repository import TrustLevelRepository
from rentpool.pool.analytics import AnalyticsAggregator
from rentpool.pool.lifecycle import PoolLifecycleManager
from rentpool.pool.reverse import ReverseMatcher
from rentpool.pool.views import ViewTracker
from rentpool.utils.dates import utcnow

service_log = logger.bind(module="PoolService")


class RequestPoolService:
    """Facade over the request pool matching engine."""

    def __init__(
        self,
        request_repo: RentalRequestRepository,
        property_repo: PropertyRepository,
        organization_repo: OrganizationRepository,
        match_repo: MatchRepository,
        lifecycle: PoolLifecycleManager,
        reverse: ReverseMatcher,
        views: ViewTracker,
        analytics: AnalyticsAggregator,
    ):
        self._requests = request_repo
        self._properties = property_repo
        self._organizations = organization_repo
        self._matches = match_repo
        self.lifecycle = lifecycle
        self.reverse = reverse
        self.views = views
        self.analytics = analytics

    @classmethod
    def from_pool(
        cls,
        pool: Pool,
        cache: RedisConnection | None = None,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    ) -> "RequestPoolService":
        """
        Build the service and its collaborators on one connection pool.

        Args:
            pool: asyncpg connection pool
            cache: Optional request cache
            config: Matching policy

        Returns:
            RequestPoolService
        """
        request_repo = RentalRequestRepository(pool)
        property_repo = PropertyRepository(pool)
        organization_repo = OrganizationRepository(pool)
        match_repo = MatchRepository(pool)
        notifications = NotificationRepository(pool)
        trust = TrustLevelRepository(pool)

        scoring = ScoringEngine(organization_repo, trust.get_user_trust_level, config)
        persistence = MatchPersistence(match_repo, notifications.notify_many)
        analytics = AnalyticsAggregator(
            request_repo, property_repo, match_repo, AnalyticsRepository(pool)
        )
        lifecycle = PoolLifecycleManager(
            request_repo=request_repo,
            match_repo=match_repo,
            discovery=CandidateDiscovery(property_repo, config),
            scoring=scoring,
            persistence=persistence,
            analytics=analytics,
            cache=cache,
            config=config,
        )
        reverse = ReverseMatcher(property_repo, request_repo, scoring, persistence, config)

        return cls(
            request_repo=request_repo,
            property_repo=property_repo,
            organization_repo=organization_repo,
            match_repo=match_repo,
            lifecycle=lifecycle,
            reverse=reverse,
            views=ViewTracker(request_repo, match_repo),
            analytics=analytics,
        )

    # ========== Pool ==========

    async def add_to_pool(self, rental_request: RentalRequest) -> int:
        """Admit a stored request and match it. Returns matches created."""
        return await self.lifecycle.add_to_pool(rental_request)

    async def remove_from_pool(
        self, rental_request_id: int, reason: PoolStatus | str = PoolStatus.MATCHED
    ) -> None:
        """Move a request to a terminal status and drop its matches."""
        await self.lifecycle.remove_from_pool(rental_request_id, reason)

    async def cleanup_expired_requests(self) -> int:
        """Expire stale requests. Returns the number expired."""
        return await self.lifecycle.cleanup_expired_requests()

    async def match_requests_for_new_property(self, property_id: str) -> int:
        """
        Reverse-match a listed property against pooled requests.

        Failures are logged and reported as zero matches.
        """
        try:
            return await self.reverse.match_requests_for_new_property(property_id)
        except Exception as e:
            service_log.error(f"Reverse matching failed for property {property_id}: {e}")
            return 0

    async def mark_as_viewed_for_org(
        self, organization_id: str, rental_request_id: int
    ) -> int:
        """Mark unseen matches as viewed. Returns the number flipped."""
        return await self.views.mark_as_viewed_for_org(organization_id, rental_request_id)

    async def get_pool_stats(self) -> PoolStats | None:
        """Pool-wide statistics, None on error."""
        return await self.analytics.get_pool_stats()

    # ========== Entry points ==========

    async def submit_request(
        self, data: RentalRequestCreate | dict[str, Any]
    ) -> tuple[RentalRequest, int]:
        """
        Store a new rental request and put it into the pool.

        Args:
            data: Request fields (loose dict input is normalized)

        Returns:
            Tuple of (stored request, matches created)
        """
        if isinstance(data, dict):
            data = RentalRequestCreate.model_validate(data)
        rental_request = await self._requests.create(data)
        service_log.info(f"Submitted request {rental_request}")
        matches = await self.add_to_pool(rental_request)
        return rental_request, matches

    async def publish_property(
        self, data: PropertyCreate | dict[str, Any]
    ) -> tuple[Property, int]:
        """
        List a new property and match it against pooled requests.

        Args:
            data: Property fields (loose dict input is normalized)

        Returns:
            Tuple of (stored property, matches created)
        """
        if isinstance(data, dict):
            data = PropertyCreate.model_validate(data)
        prop = await self._properties.create(data)
        service_log.info(f"Published property {prop.id} ({prop.city or 'N/A'})")
        matches = await self.match_requests_for_new_property(prop.id)
        return prop, matches

    # ========== Inbox ==========

    async def get_requests_for_user(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> InboxPage:
        """
        Open matched requests across every organization of a user.

        Args:
            user_id: Member user ID
            page: 1-based page number
            limit: Page size

        Returns:
            InboxPage ordered by score then recency
        """
        page = max(1, page)
        limit = max(1, limit)
        organization_ids = await self._organizations.get_ids_for_user(user_id)
        items, total = await self._matches.get_inbox(
            organization_ids, utcnow(), page=page, limit=limit
        )
        return InboxPage(
            items=items,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit),
            ),
        )


async def create_pool_service() -> RequestPoolService:
    """
    Build the service from the configured connections.

    Redis is optional: when it cannot be reached the pool runs uncached.
    """
    settings = get_settings()
    postgres = await get_postgres()

    cache = None
    try:
        cache = await get_redis()
    except Exception as e:
        service_log.warning(f"Redis unavailable, running without request cache: {e}")

    return RequestPoolService.from_pool(
        postgres.pool, cache=cache, config=settings.matching.to_config()
    )
