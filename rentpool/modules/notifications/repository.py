"""
Notification Repository.

Bulk in-app notification dispatch for new rental request matches.
"""

from asyncpg import Pool
from loguru import logger

from rentpool.modules.notifications.models import NotificationItem
from rentpool.utils.sql import affected_rows

notify_log = logger.bind(module="Notify")

NEW_RENTAL_REQUEST = "NEW_RENTAL_REQUEST"


class NotificationRepository:
    """Repository for notification database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def notify_many(self, items: list[NotificationItem]) -> int:
        """
        Notify every member of each item's organization.

        One NEW_RENTAL_REQUEST notification per (member, item), inserted in
        a single batch. Duplicates are skipped.

        Args:
            items: Organizations and the request they matched

        Returns:
            Number of notifications inserted
        """
        if not items:
            return 0

        org_ids = list(dict.fromkeys(item.organization_id for item in items))
        members_query = """
        SELECT organization_id, user_id
        FROM organization_members
        WHERE organization_id = ANY($1::TEXT[])
        """
        insert_query = """
        INSERT INTO notifications (user_id, type, entity_id, title, body, is_read, created_at)
        SELECT t.user_id, $1, t.entity_id, t.title, t.body, FALSE, NOW()
        FROM unnest($2::TEXT[], $3::TEXT[], $4::TEXT[], $5::TEXT[])
            AS t(user_id, entity_id, title, body)
        ON CONFLICT DO NOTHING
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(members_query, org_ids)

            by_org: dict[str, list[str]] = {}
            for row in rows:
                by_org.setdefault(row["organization_id"], []).append(row["user_id"])

            user_ids, entity_ids, titles, bodies = [], [], [], []
            for item in items:
                for user_id in by_org.get(item.organization_id, []):
                    user_ids.append(user_id)
                    entity_ids.append(str(item.rental_request_id))
                    titles.append(item.notification_title)
                    bodies.append(item.notification_body)

            if not user_ids:
                notify_log.debug(f"No members to notify for {len(org_ids)} organizations")
                return 0

            status = await conn.execute(
                insert_query, NEW_RENTAL_REQUEST, user_ids, entity_ids, titles, bodies
            )
            inserted = affected_rows(status)
            notify_log.info(
                f"Created {inserted} notifications for {len(org_ids)} organizations"
            )
            return inserted
