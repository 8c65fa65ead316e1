"""
Weighted match scoring.

Scores an (organization, rental request, best property) triple from five
sub-scores: location, budget, features, timing and organization reputation.
"""

import asyncio
import math
import re
from datetime import datetime
from typing import Awaitable, Callable

from loguru import logger

from rentpool.matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from rentpool.matching.discovery import OrganizationCandidate
from rentpool.matching.picker import pick_best_property
from rentpool.modules.organizations.models import Organization, OrganizationMember
from rentpool.modules.organizations.repository import OrganizationRepository
from rentpool.modules.properties.models import Property
from rentpool.modules.requests.models import RentalRequestBase
from rentpool.modules.trust.models import TrustLevel, TrustLevelResult
from rentpool.utils.dates import utcnow
from rentpool.utils.resilience import best_effort
from rentpool.utils.text import fold, round_half_up

scoring_log = logger.bind(module="Scoring")

TrustLookup = Callable[[str], Awaitable[TrustLevelResult]]

# Sub-score maxima
LOCATION_MAX = 40
BUDGET_MAX = 25
FEATURES_MAX = 20
TIMING_MAX = 10
PERFORMANCE_MAX = 5

TRUST_LEVEL_WEIGHT = {
    TrustLevel.NEW: 0.0,
    TrustLevel.RELIABLE: 0.3,
    TrustLevel.TRUSTED: 0.6,
    TrustLevel.EXCELLENT: 1.0,
}

LOCATION_SPLIT_RE = re.compile(r"[,\s]+")


class ScoredOrganization(OrganizationCandidate):
    """Candidate with its best property, score and reason."""

    best_property: Property | None = None
    match_score: int = 0
    match_reason: str = ""


def recency_boost(last_active_at: datetime | None, now: datetime) -> float:
    """
    Boost for recently active members.

    Examples:
        >>> from datetime import timedelta
        >>> now = utcnow()
        >>> recency_boost(now - timedelta(days=3), now)
        0.8
        >>> recency_boost(None, now)
        0.0
    """
    if last_active_at is None:
        return 0.0
    days = (now - last_active_at).total_seconds() / 86400
    if days <= 1:
        return 1.0
    if days <= 7:
        return 0.8
    if days <= 30:
        return 0.5
    if days <= 90:
        return 0.2
    return 0.0


def _reputation_fallback(engine: "ScoringEngine", organization: Organization) -> float:
    return 2.0 if organization.is_personal else 0.0


def _in_budget_range(rent: float, rental_request: RentalRequestBase) -> bool:
    max_budget = rental_request.max_budget
    min_budget = rental_request.min_budget
    return (
        max_budget is not None
        and (min_budget is None or rent >= min_budget)
        and rent <= max_budget
    )


def _type_matches(rental_request: RentalRequestBase, prop: Property) -> bool:
    return bool(
        rental_request.property_type
        and prop.property_type
        and rental_request.property_type.lower() in prop.property_type.lower()
    )


class ScoringEngine:
    """Computes 0-100 match scores."""

    def __init__(
        self,
        organization_repo: OrganizationRepository,
        trust_lookup: TrustLookup,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    ):
        """
        Initialize the scoring engine.

        Args:
            organization_repo: Source of organization members
            trust_lookup: Coroutine returning a user's trust level
            config: Weights and budget bands
        """
        self._organizations = organization_repo
        self._trust_lookup = trust_lookup
        self._config = config

    # ========== Sub-scores ==========

    def location_score(self, rental_request: RentalRequestBase, prop: Property) -> int:
        """City match (+30) and address token match (+10), max 40."""
        request_location = fold(rental_request.location)
        tokens = {t for t in LOCATION_SPLIT_RE.split(request_location) if t}
        city = fold(prop.city)
        address = fold(prop.address)

        score = 0
        if city and (city in request_location or city in tokens):
            score += 30
        if any(t in address for t in tokens):
            score += 10
        return min(score, LOCATION_MAX)

    def budget_score(self, rental_request: RentalRequestBase, prop: Property) -> int:
        """Rent against the budget bands, max 25; 0 when rent is unknown."""
        rent = prop.monthly_rent
        if rent is None:
            return 0

        max_budget = rental_request.max_budget
        if max_budget is None:
            return 10

        if _in_budget_range(rent, rental_request):
            return 25
        if rent <= max_budget:
            return 20
        if rent <= max_budget * self._config.budget_tolerance_multiplier:
            return 15
        if rent <= max_budget * self._config.strict_rent_multiplier:
            return 10
        return 0

    def feature_score(self, rental_request: RentalRequestBase, prop: Property) -> int:
        """Property type, bedrooms and amenity preferences, max 20."""
        score = 0
        if _type_matches(rental_request, prop):
            score += 8

        bedrooms = rental_request.bedrooms
        if bedrooms is not None and prop.bedrooms is not None:
            if prop.bedrooms == bedrooms:
                score += 6
            elif abs(prop.bedrooms - bedrooms) == 1:
                score += 3

        for preference, offered in (
            (rental_request.furnished, prop.furnished),
            (rental_request.parking, prop.parking),
            (rental_request.pets_allowed, prop.pets_allowed),
        ):
            if preference is not None and offered == preference:
                score += 2

        return min(score, FEATURES_MAX)

    def timing_score(self, rental_request: RentalRequestBase, prop: Property) -> int:
        """
        Closeness of availability to the move-in date, max 10.

        0 days -> 10, <=7 -> 8, <=30 -> 5, <=90 -> 3, else 0.
        """
        move_in = rental_request.move_in_date
        available = prop.available_from
        if move_in is None or available is None:
            return 0

        days = abs(math.ceil((available - move_in).total_seconds() / 86400))
        if days == 0:
            return 10
        if days <= 7:
            return 8
        if days <= 30:
            return 5
        if days <= 90:
            return 3
        return 0

    @best_effort(fallback=_reputation_fallback)
    async def performance_score(self, organization: Organization) -> float:
        """
        Reputation of the organization's members, 0 to 5.

        Trust levels are fetched concurrently. Any failure falls back to
        2 for personal organizations and 0 otherwise.
        """
        members = await self._organizations.get_members(organization.id)
        if not members:
            return 0.0

        trust_weights = await asyncio.gather(
            *(self._member_trust_weight(m) for m in members)
        )

        now = utcnow()
        trust = rating = dispute = misrep = recency = 0.0
        for member, trust_weight in zip(members, trust_weights):
            trust += trust_weight
            if member.total_reviews >= 3 and member.average_rating is not None:
                rating += (member.average_rating - 1) / 4
            if member.is_suspended:
                dispute += 0.5
            recency += recency_boost(member.last_active_at, now)
            if member.total_reviews == 0 and member.average_rating == 5.0:
                misrep += 0.3

        n = len(members)
        combined = (
            0.30 * trust / n
            + 0.20 * rating / n
            - 0.30 * dispute / n
            - 0.20 * misrep / n
            + 0.10 * recency / n
        )
        return max(0.0, min(float(PERFORMANCE_MAX), combined * PERFORMANCE_MAX))

    async def _member_trust_weight(self, member: OrganizationMember) -> float:
        """Trust weight of one member; a failed lookup counts as New."""
        try:
            result = await self._trust_lookup(member.user_id)
        except Exception as e:
            scoring_log.warning(f"Trust lookup failed for user {member.user_id}: {e}")
            return TRUST_LEVEL_WEIGHT[TrustLevel.NEW]
        return TRUST_LEVEL_WEIGHT.get(result.level, 0.0)

    # ========== Weighted score ==========

    async def calculate_weighted_score(
        self,
        organization: Organization,
        rental_request: RentalRequestBase,
        prop: Property | None,
        reputation: float | None = None,
    ) -> int:
        """
        Combine the sub-scores into a 0-100 match score.

        Args:
            organization: Candidate organization
            rental_request: Normalized rental request
            prop: Organization's best property for the request
            reputation: Precomputed performance score (fetched when None)

        Returns:
            Score in [0, 100]; 0 without a property
        """
        if prop is None:
            return 0

        if reputation is None:
            reputation = await self.performance_score(organization)

        weights = self._config.weights
        total = (
            self.location_score(rental_request, prop) / LOCATION_MAX * weights.location
            + self.budget_score(rental_request, prop) / BUDGET_MAX * weights.budget
            + self.feature_score(rental_request, prop) / FEATURES_MAX * weights.features
            + self.timing_score(rental_request, prop) / TIMING_MAX * weights.timing
            + reputation / PERFORMANCE_MAX * weights.performance
        )
        return max(0, min(100, round_half_up(total)))

    async def score_candidate(
        self,
        candidate: OrganizationCandidate,
        rental_request: RentalRequestBase,
        reputation: float | None = None,
    ) -> ScoredOrganization:
        """Pick the candidate's best property and score it."""
        organization = candidate.resolved_organization
        best = pick_best_property(candidate.properties, rental_request)
        score = await self.calculate_weighted_score(
            organization, rental_request, best, reputation=reputation
        )
        return ScoredOrganization(
            organization_id=candidate.organization_id,
            organization=candidate.organization,
            properties=candidate.properties,
            best_property=best,
            match_score=score,
            match_reason=generate_match_reason(
                best, rental_request, organization, self._config
            ),
        )

    async def score_candidates(
        self,
        candidates: list[OrganizationCandidate],
        rental_request: RentalRequestBase,
    ) -> list[ScoredOrganization]:
        """Score every candidate concurrently, keeping input order."""
        return list(
            await asyncio.gather(
                *(self.score_candidate(c, rental_request) for c in candidates)
            )
        )


def generate_match_reason(
    prop: Property | None,
    rental_request: RentalRequestBase,
    organization: Organization | None,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> str:
    """
    Human readable explanation of a match.

    Rent above the max budget but within the tolerance multiplier is called
    negotiable.

    Examples:
        >>> generate_match_reason(None, RentalRequestBase(), None)
        'Property criteria match'
    """
    if prop is None:
        return "Property criteria match"

    reasons = []
    city = fold(prop.city)
    if city and city in fold(rental_request.location):
        reasons.append("Perfect location match")

    rent = prop.monthly_rent
    max_budget = rental_request.max_budget
    min_budget = rental_request.min_budget
    if rent is not None:
        if _in_budget_range(rent, rental_request):
            reasons.append("Within budget range")
        elif max_budget is not None and rent <= max_budget * config.budget_tolerance_multiplier:
            reasons.append("Slightly above budget (negotiable)")
        elif min_budget is not None and rent < min_budget:
            reasons.append("Below your stated range")

    if _type_matches(rental_request, prop):
        reasons.append("Property type match")
    if rental_request.bedrooms is not None and prop.bedrooms == rental_request.bedrooms:
        reasons.append("Bedrooms match")
    if organization is not None and organization.is_personal:
        reasons.append("Personal organization")

    return ", ".join(reasons) or "Property criteria match"
