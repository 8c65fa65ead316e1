"""
Trust Level Repository.

Computes landlord trust levels from the reviews table.
"""

from asyncpg import Pool

from rentpool.modules.trust.models import TrustLevelResult, classify_landlord_trust


class TrustLevelRepository:
    """Repository for trust level lookups."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def get_user_trust_level(self, user_id: str) -> TrustLevelResult:
        """
        Get the landlord trust level of a user.

        Args:
            user_id: Reviewed user ID

        Returns:
            TrustLevelResult
        """
        query = """
        SELECT
            COUNT(*) FILTER (WHERE review_stage = 'END_OF_LEASE') AS review_count,
            AVG(rating) FILTER (WHERE review_stage = 'END_OF_LEASE') AS average_rating,
            COUNT(*) FILTER (WHERE review_stage = 'MOVE_IN') AS move_in_count,
            COUNT(*) FILTER (WHERE review_stage = 'MOVE_IN' AND rating >= 4) AS accurate_move_ins
        FROM reviews
        WHERE reviewee_id = $1 AND status = 'PUBLISHED'
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id)

        move_in_count = row["move_in_count"] or 0
        accuracy = (
            row["accurate_move_ins"] / move_in_count * 100 if move_in_count else 0.0
        )
        return classify_landlord_trust(
            review_count=row["review_count"] or 0,
            average_rating=float(row["average_rating"] or 0),
            accuracy_percentage=accuracy,
        )
