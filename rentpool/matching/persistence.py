"""
Match persistence.

Writes property-anchored matches idempotently and notifies the organizations
whose matches were actually created.
"""

from typing import Awaitable, Callable

from loguru import logger

from rentpool.matching.picker import pick_best_property
from rentpool.matching.scoring import ScoredOrganization
from rentpool.modules.matches.models import LandlordRequestMatch, MatchCreate
from rentpool.modules.matches.repository import MatchRepository
from rentpool.modules.notifications.models import NotificationItem
from rentpool.modules.requests.models import RentalRequestBase

persist_log = logger.bind(module="Persistence")

Notifier = Callable[[list[NotificationItem]], Awaitable[int]]


def dedupe_matches(rows: list[MatchCreate]) -> list[MatchCreate]:
    """Drop rows repeating an (organization, request, property) triple."""
    seen: set[tuple[str, int, str]] = set()
    unique = []
    for row in rows:
        if row.key in seen:
            continue
        seen.add(row.key)
        unique.append(row)
    return unique


class MatchPersistence:
    """Idempotent match writer with bulk notification."""

    def __init__(self, match_repo: MatchRepository, notifier: Notifier):
        """
        Initialize match persistence.

        Args:
            match_repo: Match repository
            notifier: Bulk notification coroutine (e.g. notify_many)
        """
        self._matches = match_repo
        self._notify = notifier

    async def create_matches(
        self,
        rental_request_id: int,
        scored_organizations: list[ScoredOrganization],
        rental_request: RentalRequestBase,
    ) -> int:
        """
        Persist matches for ranked organizations of one request.

        Each match is anchored to the organization's best property;
        organizations without one are skipped.

        Args:
            rental_request_id: Rental request ID
            scored_organizations: Ranked candidates
            rental_request: The request, for re-deriving the best property

        Returns:
            Number of matches actually inserted
        """
        rows = []
        for scored in scored_organizations:
            best = pick_best_property(scored.properties, rental_request)
            if best is None:
                persist_log.debug(
                    f"Skipping organization {scored.organization_id}: no anchoring property"
                )
                continue
            rows.append(
                MatchCreate(
                    organization_id=scored.organization_id,
                    rental_request_id=rental_request_id,
                    property_id=best.id,
                    match_score=scored.match_score,
                    match_reason=scored.match_reason,
                )
            )

        def describe(match: LandlordRequestMatch) -> NotificationItem:
            return NotificationItem(
                organization_id=match.organization_id,
                rental_request_id=rental_request_id,
                title=rental_request.title,
                tenant_name=rental_request.tenant_name or "A tenant",
            )

        return await self.persist(rows, describe)

    async def persist(
        self,
        rows: list[MatchCreate],
        describe: Callable[[LandlordRequestMatch], NotificationItem],
    ) -> int:
        """
        Insert rows, skipping existing triples, then notify once.

        Notification failures are logged and never undo inserted matches.

        Args:
            rows: Match rows
            describe: Builds the notification item for an inserted match

        Returns:
            Number of matches actually inserted
        """
        rows = dedupe_matches(rows)
        if not rows:
            return 0

        inserted = await self._matches.insert_many(rows)
        persist_log.info(f"Inserted {len(inserted)}/{len(rows)} matches")
        if not inserted:
            return 0

        try:
            await self._notify([describe(match) for match in inserted])
        except Exception as e:
            persist_log.error(f"Failed to send match notifications: {e}")

        return len(inserted)
