"""
Matching module for rental requests and landlord organizations.

Candidate discovery, weighted scoring, ranking and idempotent persistence
of property-anchored matches.
"""

from rentpool.matching.config import (
    DEFAULT_MATCHING_CONFIG,
    MatchingConfig,
    MatchingThresholds,
    MatchingWeights,
)
from rentpool.matching.discovery import (
    CandidateDiscovery,
    OrganizationCandidate,
    group_by_organization,
)
from rentpool.matching.persistence import MatchPersistence, dedupe_matches
from rentpool.matching.picker import pick_best_property, property_fit
from rentpool.matching.ranking import rank_candidates, score_threshold
from rentpool.matching.scoring import (
    TRUST_LEVEL_WEIGHT,
    ScoredOrganization,
    ScoringEngine,
    generate_match_reason,
    recency_boost,
)

__all__ = [
    # Config
    "MatchingConfig",
    "MatchingWeights",
    "MatchingThresholds",
    "DEFAULT_MATCHING_CONFIG",
    # Discovery
    "CandidateDiscovery",
    "OrganizationCandidate",
    "group_by_organization",
    # Scoring
    "ScoringEngine",
    "ScoredOrganization",
    "TRUST_LEVEL_WEIGHT",
    "generate_match_reason",
    "recency_boost",
    # Picker
    "pick_best_property",
    "property_fit",
    # Ranking
    "rank_candidates",
    "score_threshold",
    # Persistence
    "MatchPersistence",
    "dedupe_matches",
]
