"""
Candidate discovery for rental requests.

Fetches listable properties loosely compatible with a request and groups them
by landlord organization. Precise fit is left to scoring.
"""

from datetime import timedelta

from loguru import logger
from pydantic import BaseModel, Field

from rentpool.matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from rentpool.modules.organizations.models import Organization
from rentpool.modules.properties.models import Property, PropertyQuery
from rentpool.modules.properties.repository import PropertyRepository
from rentpool.modules.requests.models import RentalRequestBase
from rentpool.utils.sql import contains_patterns
from rentpool.utils.text import (
    city_variants,
    extract_likely_city,
    location_tokens,
    round_half_up,
)

discovery_log = logger.bind(module="Discovery")


class OrganizationCandidate(BaseModel):
    """Organization with the properties that made it a candidate."""

    organization_id: str
    organization: Organization | None = None
    properties: list[Property] = Field(default_factory=list)

    @property
    def resolved_organization(self) -> Organization:
        """Joined organization, or a bare one built from the ID."""
        return self.organization or Organization(id=self.organization_id)


def group_by_organization(
    properties: list[Property], max_per_org: int = 20
) -> list[OrganizationCandidate]:
    """
    Group properties by organization in first-seen order.

    Property IDs are deduplicated and each organization keeps at most
    `max_per_org` properties.

    Args:
        properties: Fetched properties
        max_per_org: Property cap per organization

    Returns:
        List of organization candidates
    """
    by_org: dict[str, OrganizationCandidate] = {}
    for prop in properties:
        candidate = by_org.get(prop.organization_id)
        if candidate is None:
            candidate = OrganizationCandidate(
                organization_id=prop.organization_id,
                organization=prop.organization,
            )
            by_org[prop.organization_id] = candidate

        if len(candidate.properties) >= max_per_org:
            continue
        if any(p.id == prop.id for p in candidate.properties):
            continue
        candidate.properties.append(prop)

    return list(by_org.values())


class CandidateDiscovery:
    """Finds candidate organizations for a rental request."""

    def __init__(
        self,
        property_repo: PropertyRepository,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    ):
        self._properties = property_repo
        self._config = config

    def build_query(
        self, rental_request: RentalRequestBase, rent_multiplier: float
    ) -> PropertyQuery:
        """
        Build the property query for a request.

        Args:
            rental_request: Normalized rental request
            rent_multiplier: Rent ceiling as a multiple of the max budget

        Returns:
            PropertyQuery
        """
        city = extract_likely_city(rental_request.location)
        max_budget = rental_request.max_budget
        move_in = rental_request.move_in_date

        return PropertyQuery(
            city_patterns=contains_patterns(city_variants(city)),
            exact_cities=location_tokens(rental_request.location),
            max_rent=(
                round_half_up(max_budget * rent_multiplier)
                if max_budget is not None
                else None
            ),
            min_rent=rental_request.min_budget,
            available_before=(
                move_in + timedelta(days=self._config.availability_flex_days)
                if move_in is not None
                else None
            ),
            limit=self._config.max_candidate_properties,
        )

    async def find_candidates(
        self, rental_request: RentalRequestBase
    ) -> list[OrganizationCandidate]:
        """
        Find organizations with at least one loosely compatible property.

        Runs a strict query first (rent up to 120% of the max budget) and
        relaxes the rent ceiling to 200% when it returns nothing.

        Args:
            rental_request: Normalized rental request

        Returns:
            Organization candidates, empty when nothing is found
        """
        request_ref = getattr(rental_request, "id", None)
        discovery_log.info(
            f"Discovering candidates for request {request_ref} "
            f"(budget {rental_request.min_budget}-{rental_request.max_budget})"
        )

        query = self.build_query(rental_request, self._config.strict_rent_multiplier)
        properties = await self._properties.find_available(query)

        if not properties:
            discovery_log.warning(f"No properties for request {request_ref}, relaxing filters")
            query = self.build_query(rental_request, self._config.relaxed_rent_multiplier)
            properties = await self._properties.find_available(query)

        candidates = group_by_organization(properties, self._config.max_properties_per_org)
        discovery_log.info(
            f"Found {len(candidates)} candidate organizations "
            f"from {len(properties)} properties"
        )
        return candidates
