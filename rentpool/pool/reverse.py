"""
Reverse matching.

When a property is listed, matches it against requests already in the pool.
"""

from datetime import timedelta

from loguru import logger

from rentpool.matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from rentpool.matching.discovery import OrganizationCandidate
from rentpool.matching.persistence import MatchPersistence
from rentpool.matching.ranking import score_threshold
from rentpool.matching.scoring import ScoringEngine
from rentpool.modules.matches.models import LandlordRequestMatch, MatchCreate
from rentpool.modules.notifications.models import NotificationItem
from rentpool.modules.properties.repository import PropertyRepository
from rentpool.modules.requests.models import RentalRequest
from rentpool.modules.requests.repository import RentalRequestRepository
from rentpool.utils.dates import utcnow
from rentpool.utils.sql import contains_patterns
from rentpool.utils.text import city_variants

reverse_log = logger.bind(module="Reverse")

REVERSE_NOTIFICATION_TITLE = "New tenant request matches your newly listed property"


class ReverseMatcher:
    """Matches a newly listed property against pooled requests."""

    def __init__(
        self,
        property_repo: PropertyRepository,
        request_repo: RentalRequestRepository,
        scoring: ScoringEngine,
        persistence: MatchPersistence,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    ):
        self._properties = property_repo
        self._requests = request_repo
        self._scoring = scoring
        self._persistence = persistence
        self._config = config

    async def match_requests_for_new_property(self, property_id: str) -> int:
        """
        Create matches between a listed property and compatible requests.

        Only AVAILABLE properties with availability on are matched. Requests
        must be ACTIVE, unexpired, recent, in the property's city and able
        to afford its rent.

        Args:
            property_id: Property ID

        Returns:
            Number of matches created
        """
        prop = await self._properties.get_by_id(property_id)
        if prop is None:
            reverse_log.warning(f"Property {property_id} not found")
            return 0
        if not prop.is_listable:
            reverse_log.info(
                f"Property {property_id} is not listable "
                f"({prop.status.value}, availability={prop.availability})"
            )
            return 0

        variants = city_variants(prop.city)
        if not variants:
            reverse_log.info(f"Property {property_id} has no city, skipping")
            return 0

        now = utcnow()
        requests = await self._requests.find_for_property(
            location_patterns=contains_patterns(variants),
            rent=prop.monthly_rent,
            rent_multiplier=self._config.strict_rent_multiplier,
            created_after=now - timedelta(days=self._config.reverse_window_days),
            now=now,
            limit=self._config.reverse_max_requests,
        )
        reverse_log.info(f"Property {property_id}: {len(requests)} pooled requests to score")
        if not requests:
            return 0

        candidate = OrganizationCandidate(
            organization_id=prop.organization_id,
            organization=prop.organization,
            properties=[prop],
        )
        reputation = await self._scoring.performance_score(candidate.resolved_organization)

        rows = []
        matched: dict[int, RentalRequest] = {}
        for rental_request in requests:
            scored = await self._scoring.score_candidate(
                candidate, rental_request, reputation=reputation
            )
            if scored.match_score < score_threshold(rental_request, self._config):
                continue
            matched[rental_request.id] = rental_request
            rows.append(
                MatchCreate(
                    organization_id=prop.organization_id,
                    rental_request_id=rental_request.id,
                    property_id=prop.id,
                    match_score=scored.match_score,
                    match_reason=scored.match_reason,
                )
            )

        def describe(match: LandlordRequestMatch) -> NotificationItem:
            rental_request = matched[match.rental_request_id]
            return NotificationItem(
                organization_id=match.organization_id,
                rental_request_id=match.rental_request_id,
                title=rental_request.title,
                headline=REVERSE_NOTIFICATION_TITLE,
                tenant_name=rental_request.tenant_name or "Tenant",
            )

        created = await self._persistence.persist(rows, describe)
        reverse_log.info(
            f"Property {property_id}: {len(rows)} requests passed threshold, "
            f"{created} matches created"
        )
        return created
