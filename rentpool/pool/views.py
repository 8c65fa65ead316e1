"""
View tracking for matched requests.
"""

from loguru import logger

from rentpool.modules.matches.repository import MatchRepository
from rentpool.modules.requests.repository import RentalRequestRepository

views_log = logger.bind(module="Views")


class ViewTracker:
    """Marks matches as viewed and keeps the request view counter in step."""

    def __init__(
        self, request_repo: RentalRequestRepository, match_repo: MatchRepository
    ):
        self._requests = request_repo
        self._matches = match_repo

    async def mark_as_viewed_for_org(
        self, organization_id: str, rental_request_id: int
    ) -> int:
        """
        Mark an organization's unseen matches for a request as viewed.

        The view counter grows by the number of matches flipped, so a
        repeated call adds nothing.

        Args:
            organization_id: Organization ID
            rental_request_id: Rental request ID

        Returns:
            Number of matches newly marked as viewed
        """
        viewed = await self._matches.mark_viewed_for_org(organization_id, rental_request_id)
        if viewed > 0:
            await self._requests.increment_view_count(rental_request_id, viewed)
            views_log.debug(
                f"Organization {organization_id} viewed request {rental_request_id} "
                f"({viewed} matches)"
            )
        return viewed
