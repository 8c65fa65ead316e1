"""
Rental Request Repository.

Data access layer for rental request and pool status operations.
"""

from datetime import datetime
from typing import Optional

from asyncpg import Pool

from rentpool.modules.requests.models import PoolStatus, RentalRequest, RentalRequestCreate
from rentpool.utils.sql import affected_rows


class RentalRequestRepository:
    """Repository for rental request database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def create(self, data: RentalRequestCreate) -> RentalRequest:
        """
        Create a new rental request.

        Args:
            data: Normalized request fields

        Returns:
            Created rental request
        """
        query = """
        INSERT INTO rental_requests (
            tenant_id, title, location, budget, budget_from, budget_to,
            move_in_date, property_type, bedrooms,
            furnished, parking, pets_allowed, tenant_name
        ) VALUES (
            $1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13
        )
        RETURNING *
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                query,
                data.tenant_id,
                data.title,
                data.location,
                data.budget,
                data.budget_from,
                data.budget_to,
                data.move_in_date,
                data.property_type,
                data.bedrooms,
                data.furnished,
                data.parking,
                data.pets_allowed,
                data.tenant_name,
            )
            return RentalRequest.model_validate(dict(row))

    async def get_by_id(self, rental_request_id: int) -> Optional[RentalRequest]:
        """
        Get rental request by ID.

        Args:
            rental_request_id: Rental request ID

        Returns:
            Rental request or None if not found
        """
        query = "SELECT * FROM rental_requests WHERE id = $1"
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, rental_request_id)
            return RentalRequest.model_validate(dict(row)) if row else None

    async def admit(self, rental_request_id: int, expires_at: datetime) -> bool:
        """
        Put a request into the pool as ACTIVE with its expiration.

        Requests already in a terminal pool status are left untouched.

        Args:
            rental_request_id: Rental request ID
            expires_at: Computed pool expiration

        Returns:
            True if updated, False if the request does not exist or is closed
        """
        query = """
        UPDATE rental_requests
        SET pool_status = 'ACTIVE', expires_at = $2, updated_at = NOW()
        WHERE id = $1
          AND (pool_status IS NULL OR pool_status = 'ACTIVE')
        RETURNING id
        """
        async with self._pool.acquire() as conn:
            result = await conn.fetchrow(query, rental_request_id, expires_at)
            return result is not None

    async def close_in_pool(
        self, rental_request_id: int, status: PoolStatus
    ) -> Optional[str]:
        """
        Move an ACTIVE request to a terminal pool status.

        Args:
            rental_request_id: Rental request ID
            status: Terminal pool status

        Returns:
            Request location if the transition happened, None otherwise
        """
        query = """
        UPDATE rental_requests
        SET pool_status = $2, updated_at = NOW()
        WHERE id = $1 AND pool_status = 'ACTIVE'
        RETURNING location
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, rental_request_id, status.value)
            return row["location"] if row else None

    async def find_expired(self, now: datetime) -> list[dict]:
        """
        Find ACTIVE requests whose expiration has passed.

        Args:
            now: Reference time

        Returns:
            List of {id, title, location, move_in_date, expires_at} records
        """
        query = """
        SELECT id, title, location, move_in_date, expires_at
        FROM rental_requests
        WHERE pool_status = 'ACTIVE' AND expires_at < $1
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, now)
            return [dict(row) for row in rows]

    async def mark_expired(self, now: datetime) -> int:
        """
        Set every ACTIVE request past its expiration to EXPIRED.

        Args:
            now: Reference time

        Returns:
            Number of requests updated
        """
        query = """
        UPDATE rental_requests
        SET pool_status = 'EXPIRED', updated_at = NOW()
        WHERE pool_status = 'ACTIVE' AND expires_at < $1
        """
        async with self._pool.acquire() as conn:
            status = await conn.execute(query, now)
            return affected_rows(status)

    async def increment_view_count(self, rental_request_id: int, by: int) -> None:
        """Add `by` to the denormalized view counter."""
        query = """
        UPDATE rental_requests
        SET view_count = view_count + $2
        WHERE id = $1
        """
        async with self._pool.acquire() as conn:
            await conn.execute(query, rental_request_id, by)

    async def count_by_location(self, location: str) -> dict:
        """
        Count requests for a location, split by pool status.

        Args:
            location: Exact request location

        Returns:
            Dict with total, active, matched, expired counts
        """
        query = """
        SELECT
            COUNT(*) AS total,
            COUNT(*) FILTER (WHERE pool_status = 'ACTIVE') AS active,
            COUNT(*) FILTER (WHERE pool_status = 'MATCHED') AS matched,
            COUNT(*) FILTER (WHERE pool_status = 'EXPIRED') AS expired
        FROM rental_requests
        WHERE location = $1
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, location)
            return dict(row)

    async def count_active(self) -> int:
        """Count requests currently in the pool."""
        query = "SELECT COUNT(*) FROM rental_requests WHERE pool_status = 'ACTIVE'"
        async with self._pool.acquire() as conn:
            result = await conn.fetchrow(query)
            return result["count"]

    async def find_for_property(
        self,
        location_patterns: list[str],
        rent: Optional[float],
        rent_multiplier: float,
        created_after: datetime,
        now: datetime,
        limit: int = 200,
    ) -> list[RentalRequest]:
        """
        Find pooled requests a newly listed property could satisfy.

        Location and budget are two independent groups joined with AND:
        the location must contain one of the city patterns, and the rent
        must fit under the request's rent ceiling unless the request states
        no max budget. The ceiling is the max budget (budget_to, else budget)
        times the multiplier, rounded half up, as in candidate discovery.

        Args:
            location_patterns: ILIKE patterns for the property city
            rent: Property rent (None = no budget filter)
            rent_multiplier: Rent ceiling as a multiple of the max budget
            created_after: Only requests created after this time
            now: Reference time for expiration
            limit: Maximum number of requests

        Returns:
            Newest-first list of rental requests
        """
        query = """
        SELECT * FROM rental_requests
        WHERE pool_status = 'ACTIVE'
          AND expires_at > $1
          AND created_at >= $2

          -- Location group
          AND location ILIKE ANY($3::TEXT[])

          -- Budget group
          AND (
              $4::NUMERIC IS NULL
              OR FLOOR(COALESCE(budget_to, budget) * $5::NUMERIC + 0.5) >= $4
              OR (budget_to IS NULL AND budget IS NULL)
          )
        ORDER BY created_at DESC
        LIMIT $6
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                query,
                now,
                created_after,
                location_patterns,
                rent,
                rent_multiplier,
                limit,
            )
            return [RentalRequest.model_validate(dict(row)) for row in rows]
