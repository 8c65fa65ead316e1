"""
Organization Repository.

Data access layer for organizations and their members.
"""

from typing import Optional

from asyncpg import Pool

from rentpool.modules.organizations.models import Organization, OrganizationMember


class OrganizationRepository:
    """Repository for organization database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def get_by_id(self, organization_id: str) -> Optional[Organization]:
        """
        Get organization by ID.

        Args:
            organization_id: Organization ID

        Returns:
            Organization or None if not found
        """
        query = "SELECT id, name, is_personal FROM organizations WHERE id = $1"
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, organization_id)
            return Organization.model_validate(dict(row)) if row else None

    async def get_members(self, organization_id: str) -> list[OrganizationMember]:
        """
        Get members of an organization with their reputation fields.

        Args:
            organization_id: Organization ID

        Returns:
            List of organization members
        """
        query = """
        SELECT
            om.organization_id,
            u.id AS user_id,
            u.average_rating,
            u.total_reviews,
            u.last_active_at,
            u.is_suspended
        FROM organization_members om
        JOIN users u ON u.id = om.user_id
        WHERE om.organization_id = $1
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, organization_id)
            return [OrganizationMember.model_validate(dict(row)) for row in rows]

    async def get_ids_for_user(self, user_id: str) -> list[str]:
        """
        Get IDs of every organization a user belongs to.

        Args:
            user_id: User ID

        Returns:
            List of organization IDs
        """
        query = "SELECT organization_id FROM organization_members WHERE user_id = $1"
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, user_id)
            return [row["organization_id"] for row in rows]
