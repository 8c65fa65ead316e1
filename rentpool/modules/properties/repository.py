"""
Property Repository.

Data access layer for property listing and candidate discovery.
"""

from typing import Optional

from asyncpg import Pool
from loguru import logger

from rentpool.modules.properties.models import Property, PropertyCreate, PropertyQuery

properties_log = logger.bind(module="Properties")

PROPERTY_COLUMNS = """
    p.id, p.organization_id, p.name, p.status, p.availability,
    p.city, p.address, p.monthly_rent, p.property_type, p.bedrooms,
    p.furnished, p.parking, p.pets_allowed, p.available_from,
    o.name AS organization_name, o.is_personal AS organization_is_personal
"""


class PropertyRepository:
    """Repository for property database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def create(self, data: PropertyCreate) -> Property:
        """
        List a new property.

        Args:
            data: Property fields

        Returns:
            Created property (organization not joined)
        """
        query = """
        INSERT INTO properties (
            organization_id, name, status, availability, city, address,
            monthly_rent, property_type, bedrooms,
            furnished, parking, pets_allowed, available_from
        ) VALUES (
            $1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13
        )
        RETURNING id, organization_id, name, status, availability, city, address,
                  monthly_rent, property_type, bedrooms,
                  furnished, parking, pets_allowed, available_from
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                query,
                data.organization_id,
                data.name,
                data.status.value,
                data.availability,
                data.city,
                data.address,
                data.monthly_rent,
                data.property_type,
                data.bedrooms,
                data.furnished,
                data.parking,
                data.pets_allowed,
                data.available_from,
            )
            properties_log.info(f"Listed property {row['id']} for organization {data.organization_id}")
            return Property.from_row(dict(row))

    async def get_by_id(self, property_id: str) -> Optional[Property]:
        """
        Get property by ID, joined with its organization.

        Args:
            property_id: Property ID

        Returns:
            Property or None if not found
        """
        query = f"""
        SELECT {PROPERTY_COLUMNS}
        FROM properties p
        JOIN organizations o ON o.id = p.organization_id
        WHERE p.id = $1
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, property_id)
            return Property.from_row(dict(row)) if row else None

    async def find_available(self, criteria: PropertyQuery) -> list[Property]:
        """
        Find listable properties matching loose candidate criteria.

        Args:
            criteria: City, rent band and availability constraints

        Returns:
            List of properties with their organization joined
        """
        query = f"""
        SELECT {PROPERTY_COLUMNS}
        FROM properties p
        JOIN organizations o ON o.id = p.organization_id
        WHERE p.status = 'AVAILABLE'
          AND p.availability = TRUE

          -- City (empty = no filter)
          AND (
              (cardinality($1::TEXT[]) = 0 AND cardinality($2::TEXT[]) = 0)
              OR p.city ILIKE ANY($1::TEXT[])
              OR p.city = ANY($2::TEXT[])
          )

          -- Rent band
          AND ($3::NUMERIC IS NULL OR p.monthly_rent <= $3)
          AND ($4::NUMERIC IS NULL OR p.monthly_rent >= $4)

          -- Availability (NULL = available now)
          AND ($5::TIMESTAMPTZ IS NULL OR p.available_from IS NULL OR p.available_from <= $5)
        ORDER BY p.created_at DESC
        LIMIT $6
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                query,
                criteria.city_patterns,
                criteria.exact_cities,
                criteria.max_rent,
                criteria.min_rent,
                criteria.available_before,
                criteria.limit,
            )
            return [Property.from_row(dict(row)) for row in rows]

    async def count_available_organizations(self) -> int:
        """Count organizations with at least one listable property."""
        query = """
        SELECT COUNT(DISTINCT organization_id)
        FROM properties
        WHERE status = 'AVAILABLE' AND availability = TRUE
        """
        async with self._pool.acquire() as conn:
            result = await conn.fetchrow(query)
            return result["count"]
