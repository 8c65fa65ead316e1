"""
Matching Configuration.

Immutable scoring and pool policy passed into the matching components.
"""

from pydantic import BaseModel, ConfigDict, Field


class MatchingWeights(BaseModel):
    """Weights applied to each normalized sub-score (sum to 100)."""

    model_config = ConfigDict(frozen=True)

    location: int = 40
    budget: int = 25
    features: int = 20
    timing: int = 10
    performance: int = 5


class MatchingThresholds(BaseModel):
    """Score thresholds and result caps."""

    model_config = ConfigDict(frozen=True)

    normal: int = 40
    no_budget: int = Field(default=30, description="Used when the request has no budget bounds")
    fallback_top_n: int = Field(default=3, description="Returned when nothing passes the threshold")
    max_results: int = 20


class MatchingConfig(BaseModel):
    """Full matching policy."""

    model_config = ConfigDict(frozen=True)

    weights: MatchingWeights = MatchingWeights()
    thresholds: MatchingThresholds = MatchingThresholds()

    # Budget bands (multipliers of the max budget)
    budget_tolerance_multiplier: float = 1.1
    strict_rent_multiplier: float = 1.2
    relaxed_rent_multiplier: float = 2.0

    # Candidate discovery bounds
    availability_flex_days: int = 30
    max_candidate_properties: int = 200
    max_properties_per_org: int = 20

    # Pool expiration
    expiry_lead_days: int = 3
    expiry_grace_hours: int = 24
    default_expiry_days: int = 14

    # Reverse matching bounds
    reverse_window_days: int = 60
    reverse_max_requests: int = 200


DEFAULT_MATCHING_CONFIG = MatchingConfig()
