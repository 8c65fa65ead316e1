"""
Threshold and ranking policy for scored candidates.
"""

from loguru import logger

from rentpool.matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from rentpool.matching.scoring import ScoredOrganization
from rentpool.modules.requests.models import RentalRequestBase

ranking_log = logger.bind(module="Ranking")


def score_threshold(
    rental_request: RentalRequestBase, config: MatchingConfig = DEFAULT_MATCHING_CONFIG
) -> int:
    """
    Minimum score for a request.

    Requests without any budget bound use the lower no-budget threshold.
    """
    thresholds = config.thresholds
    if rental_request.max_budget is None and rental_request.min_budget is None:
        return min(thresholds.normal, thresholds.no_budget)
    return thresholds.normal


def rank_candidates(
    scored: list[ScoredOrganization],
    rental_request: RentalRequestBase,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> list[ScoredOrganization]:
    """
    Sort, filter and cap scored candidates.

    Candidates are sorted by score (ties keep discovery order) and kept when
    they reach the threshold. When none do, the top few are returned anyway.

    Args:
        scored: Scored candidates
        rental_request: Request the candidates were scored for
        config: Thresholds and caps

    Returns:
        At most `max_results` candidates, best first
    """
    thresholds = config.thresholds
    threshold = score_threshold(rental_request, config)

    ordered = sorted(scored, key=lambda s: s.match_score, reverse=True)
    kept = [s for s in ordered if s.match_score >= threshold]

    if not kept and ordered:
        ranking_log.warning(
            f"No candidate reached threshold {threshold}, "
            f"falling back to top {thresholds.fallback_top_n} of {len(ordered)}"
        )
        kept = ordered[: thresholds.fallback_top_n]

    ranking_log.info(f"Ranked {len(ordered)} -> {len(kept)} (threshold {threshold})")
    return kept[: thresholds.max_results]
