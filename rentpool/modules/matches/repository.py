"""
Match Repository.

Data access layer for landlord request matches.
"""

from datetime import datetime

from asyncpg import Pool

from rentpool.modules.matches.models import InboxItem, LandlordRequestMatch, MatchCreate
from rentpool.utils.sql import affected_rows

INBOX_FILTER = """
WHERE m.organization_id = ANY($1::TEXT[])
  AND m.status = 'ACTIVE'
  AND m.is_responded = FALSE
  AND r.pool_status = 'ACTIVE'
  AND r.expires_at > $2
"""


class MatchRepository:
    """Repository for match database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def insert_many(self, matches: list[MatchCreate]) -> list[LandlordRequestMatch]:
        """
        Insert matches in one statement, skipping existing triples.

        Safe to retry: rows already present for the same
        (organization_id, rental_request_id, property_id) are left alone.

        Args:
            matches: Match rows to insert

        Returns:
            Matches actually inserted
        """
        if not matches:
            return []

        query = """
        INSERT INTO landlord_request_matches (
            organization_id, rental_request_id, property_id,
            match_score, match_reason, status, is_viewed, is_responded,
            created_at, updated_at
        )
        SELECT
            t.organization_id, t.rental_request_id, t.property_id,
            t.match_score, t.match_reason, t.status, t.is_viewed, t.is_responded,
            NOW(), NOW()
        FROM unnest(
            $1::TEXT[], $2::INT[], $3::TEXT[], $4::INT[],
            $5::TEXT[], $6::TEXT[], $7::BOOLEAN[], $8::BOOLEAN[]
        ) AS t(
            organization_id, rental_request_id, property_id, match_score,
            match_reason, status, is_viewed, is_responded
        )
        ON CONFLICT (organization_id, rental_request_id, property_id) DO NOTHING
        RETURNING *
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                query,
                [m.organization_id for m in matches],
                [m.rental_request_id for m in matches],
                [m.property_id for m in matches],
                [m.match_score for m in matches],
                [m.match_reason for m in matches],
                [m.status.value for m in matches],
                [m.is_viewed for m in matches],
                [m.is_responded for m in matches],
            )
            return [LandlordRequestMatch.model_validate(dict(row)) for row in rows]

    async def delete_by_request(self, rental_request_id: int) -> int:
        """
        Delete every match of a rental request.

        Args:
            rental_request_id: Rental request ID

        Returns:
            Number of deleted matches
        """
        query = "DELETE FROM landlord_request_matches WHERE rental_request_id = $1"
        async with self._pool.acquire() as conn:
            status = await conn.execute(query, rental_request_id)
            return affected_rows(status)

    async def mark_viewed_for_org(
        self, organization_id: str, rental_request_id: int
    ) -> int:
        """
        Mark an organization's unseen matches for a request as viewed.

        Only rows still unseen are touched, so repeated calls return 0.

        Args:
            organization_id: Organization ID
            rental_request_id: Rental request ID

        Returns:
            Number of matches flipped to viewed
        """
        query = """
        UPDATE landlord_request_matches
        SET is_viewed = TRUE, updated_at = NOW()
        WHERE organization_id = $1
          AND rental_request_id = $2
          AND is_viewed = FALSE
        """
        async with self._pool.acquire() as conn:
            status = await conn.execute(query, organization_id, rental_request_id)
            return affected_rows(status)

    async def count_since(self, since: datetime) -> int:
        """Count matches created at or after `since`."""
        query = "SELECT COUNT(*) FROM landlord_request_matches WHERE created_at >= $1"
        async with self._pool.acquire() as conn:
            result = await conn.fetchrow(query, since)
            return result["count"]

    async def get_inbox(
        self,
        organization_ids: list[str],
        now: datetime,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[InboxItem], int]:
        """
        Get open matches for a set of organizations, best first.

        Args:
            organization_ids: Organizations whose inbox to read
            now: Reference time for request expiration
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (page items, total count)
        """
        if not organization_ids:
            return [], 0

        offset = (page - 1) * limit
        query = f"""
        SELECT
            m.id AS match_id,
            m.organization_id,
            m.match_score,
            m.match_reason,
            m.is_viewed,
            m.created_at AS matched_at,
            r.id AS rental_request_id,
            r.title,
            r.location,
            r.budget,
            r.budget_from,
            r.budget_to,
            r.move_in_date,
            r.tenant_name,
            r.expires_at,
            p.id AS property_id,
            p.name AS property_name,
            p.city AS property_city,
            p.monthly_rent AS property_rent
        FROM landlord_request_matches m
        JOIN rental_requests r ON r.id = m.rental_request_id
        JOIN properties p ON p.id = m.property_id
        {INBOX_FILTER}
        ORDER BY m.match_score DESC, m.created_at DESC
        LIMIT $3 OFFSET $4
        """
        count_query = f"""
        SELECT COUNT(*)
        FROM landlord_request_matches m
        JOIN rental_requests r ON r.id = m.rental_request_id
        {INBOX_FILTER}
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, organization_ids, now, limit, offset)
            total = await conn.fetchrow(count_query, organization_ids, now)
            return [InboxItem.model_validate(dict(row)) for row in rows], total["count"]
