"""
Unit tests for the asyncpg repositories.

Queries run against a mocked pool; tests check the arguments sent and how
rows are mapped back.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from rentpool.modules.analytics.models import RequestPoolAnalytics
from rentpool.modules.analytics.repository import AnalyticsRepository
from rentpool.modules.matches.models import MatchCreate
from rentpool.modules.matches.repository import MatchRepository
from rentpool.modules.notifications.models import NotificationItem
from rentpool.modules.notifications.repository import NEW_RENTAL_REQUEST, NotificationRepository
from rentpool.modules.organizations.repository import OrganizationRepository
from rentpool.modules.properties.models import PropertyQuery, PropertyStatus
from rentpool.modules.properties.repository import PropertyRepository
from rentpool.modules.requests.models import PoolStatus
from rentpool.modules.requests.repository import RentalRequestRepository
from rentpool.modules.trust.models import TrustLevel
from rentpool.modules.trust.repository import TrustLevelRepository
from tests.fixtures.database import sql_of

# Import fixtures
pytest_plugins = ["tests.fixtures.database"]

NOW = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================
# RentalRequestRepository tests
# ============================================================


class TestRentalRequestRepository:
    """Tests for RentalRequestRepository."""

    async def test_admit(self, db_pool, conn):
        """Admission reports whether the row exists."""
        conn.fetchrow.return_value = {"id": 1}
        assert await RentalRequestRepository(db_pool).admit(1, NOW) is True
        assert conn.fetchrow.await_args.args[1:] == (1, NOW)

    async def test_admit_skips_closed_requests(self, db_pool, conn):
        """The update only touches requests not yet closed."""
        await RentalRequestRepository(db_pool).admit(1, NOW)
        assert "AND (pool_status IS NULL OR pool_status = 'ACTIVE')" in sql_of(
            conn.fetchrow.await_args
        )

    async def test_admit_missing(self, db_pool):
        """Unknown IDs are not admitted."""
        assert await RentalRequestRepository(db_pool).admit(99, NOW) is False

    async def test_close_in_pool(self, db_pool, conn):
        """Only ACTIVE rows move; the location comes back."""
        conn.fetchrow.return_value = {"location": "Poznań"}
        location = await RentalRequestRepository(db_pool).close_in_pool(1, PoolStatus.MATCHED)

        assert location == "Poznań"
        assert conn.fetchrow.await_args.args[1:] == (1, "MATCHED")
        assert "pool_status = 'ACTIVE'" in sql_of(conn.fetchrow.await_args)

    async def test_mark_expired(self, db_pool, conn):
        """The affected row count is returned."""
        conn.execute.return_value = "UPDATE 3"
        assert await RentalRequestRepository(db_pool).mark_expired(NOW) == 3

    async def test_get_by_id(self, db_pool, conn):
        """Rows are normalized into RentalRequest."""
        conn.fetchrow.return_value = {
            "id": 5,
            "title": "Studio",
            "location": "Gdańsk",
            "budget_to": Decimal("2500.00"),
            "pool_status": "ACTIVE",
            "move_in_date": datetime(2025, 10, 1),
        }
        request = await RentalRequestRepository(db_pool).get_by_id(5)

        assert request.max_budget == 2500.0
        assert request.pool_status == PoolStatus.ACTIVE
        assert request.move_in_date.tzinfo is not None

    async def test_count_by_location(self, db_pool, conn):
        """Counts are returned as a plain dict."""
        conn.fetchrow.return_value = {"total": 3, "active": 1, "matched": 1, "expired": 1}
        counts = await RentalRequestRepository(db_pool).count_by_location("Poznań")
        assert counts == {"total": 3, "active": 1, "matched": 1, "expired": 1}

    async def test_find_for_property_filters(self, db_pool, conn):
        """Location and budget are separate groups joined with AND."""
        created_after = NOW - timedelta(days=60)
        await RentalRequestRepository(db_pool).find_for_property(
            location_patterns=["%Poznań%"],
            rent=2500.0,
            rent_multiplier=1.2,
            created_after=created_after,
            now=NOW,
            limit=50,
        )

        call = conn.fetch.await_args
        assert call.args[1:] == (NOW, created_after, ["%Poznań%"], 2500.0, 1.2, 50)
        sql = sql_of(call)
        assert "AND location ILIKE ANY($3::TEXT[]) -- Budget group AND ( $4::NUMERIC IS NULL" in sql
        assert "FLOOR(COALESCE(budget_to, budget) * $5::NUMERIC + 0.5) >= $4" in sql
        assert "OR location" not in sql


# ============================================================
# PropertyRepository tests
# ============================================================


class TestPropertyRepository:
    """Tests for PropertyRepository."""

    async def test_find_available_arguments(self, db_pool, conn):
        """Query criteria are passed positionally."""
        criteria = PropertyQuery(
            city_patterns=["%Poznań%"],
            exact_cities=["Poznań"],
            max_rent=3600,
            min_rent=2000,
            limit=200,
        )
        await PropertyRepository(db_pool).find_available(criteria)

        call = conn.fetch.await_args
        assert call.args[1:] == (["%Poznań%"], ["Poznań"], 3600, 2000, None, 200)
        assert "p.status = 'AVAILABLE' AND p.availability = TRUE" in sql_of(call)

    async def test_rows_carry_organization(self, db_pool, conn):
        """Joined organization columns become an Organization."""
        conn.fetch.return_value = [
            {
                "id": "p1",
                "organization_id": "org_a",
                "status": "AVAILABLE",
                "availability": True,
                "city": "Poznań",
                "monthly_rent": Decimal("2500.00"),
                "organization_name": "Anna",
                "organization_is_personal": True,
            }
        ]
        (prop,) = await PropertyRepository(db_pool).find_available(PropertyQuery())

        assert prop.status is PropertyStatus.AVAILABLE
        assert prop.monthly_rent == 2500.0
        assert prop.organization.is_personal is True
        assert prop.organization.name == "Anna"

    async def test_get_by_id_missing(self, db_pool):
        """Unknown IDs return None."""
        assert await PropertyRepository(db_pool).get_by_id("nope") is None


# ============================================================
# MatchRepository tests
# ============================================================


class TestMatchRepository:
    """Tests for MatchRepository."""

    async def test_insert_many_empty(self, db_pool, conn):
        """Nothing to insert, no query."""
        assert await MatchRepository(db_pool).insert_many([]) == []
        conn.fetch.assert_not_awaited()

    async def test_insert_many(self, db_pool, conn):
        """Rows go in as parallel arrays; returned rows are the inserted ones."""
        rows = [
            MatchCreate(organization_id="o1", rental_request_id=1, property_id="p1", match_score=80),
            MatchCreate(organization_id="o2", rental_request_id=1, property_id="p2", match_score=55),
        ]
        conn.fetch.return_value = [
            {**rows[0].model_dump(mode="json"), "id": 10, "created_at": NOW, "updated_at": NOW}
        ]
        inserted = await MatchRepository(db_pool).insert_many(rows)

        call = conn.fetch.await_args
        assert call.args[1] == ["o1", "o2"]
        assert call.args[3] == ["p1", "p2"]
        assert call.args[6] == ["ACTIVE", "ACTIVE"]
        assert (
            "ON CONFLICT (organization_id, rental_request_id, property_id) DO NOTHING"
            in sql_of(call)
        )
        assert [m.id for m in inserted] == [10]

    async def test_mark_viewed_for_org(self, db_pool, conn):
        """Only unseen rows are updated and counted."""
        conn.execute.return_value = "UPDATE 2"
        assert await MatchRepository(db_pool).mark_viewed_for_org("o1", 1) == 2
        assert "AND is_viewed = FALSE" in sql_of(conn.execute.await_args)

    async def test_delete_by_request(self, db_pool, conn):
        """Deleted row count is returned."""
        conn.execute.return_value = "DELETE 4"
        assert await MatchRepository(db_pool).delete_by_request(1) == 4

    async def test_get_inbox_no_organizations(self, db_pool):
        """Users outside any organization have an empty inbox."""
        assert await MatchRepository(db_pool).get_inbox([], NOW) == ([], 0)
        db_pool.acquire.assert_not_called()

    async def test_get_inbox_paging(self, db_pool, conn):
        """Offset is derived from page and limit."""
        conn.fetch.return_value = [
            {
                "match_id": 1,
                "organization_id": "o1",
                "match_score": 80,
                "rental_request_id": 1,
                "budget_to": Decimal("3000"),
                "property_id": "p1",
                "property_rent": Decimal("2500"),
            }
        ]
        conn.fetchrow.return_value = {"count": 21}
        items, total = await MatchRepository(db_pool).get_inbox(["o1"], NOW, page=3, limit=10)

        assert total == 21
        assert items[0].property_rent == 2500.0
        assert conn.fetch.await_args.args[1:] == (["o1"], NOW, 10, 20)
        assert "ORDER BY m.match_score DESC, m.created_at DESC" in sql_of(conn.fetch.await_args)


# ============================================================
# OrganizationRepository tests
# ============================================================


class TestOrganizationRepository:
    """Tests for OrganizationRepository."""

    async def test_get_members(self, db_pool, conn):
        """Nullable user fields get defaults."""
        conn.fetch.return_value = [
            {
                "organization_id": "o1",
                "user_id": "u1",
                "average_rating": 4.5,
                "total_reviews": None,
                "last_active_at": None,
                "is_suspended": None,
            }
        ]
        (member,) = await OrganizationRepository(db_pool).get_members("o1")
        assert member.total_reviews == 0
        assert member.is_suspended is False

    async def test_get_ids_for_user(self, db_pool, conn):
        """Organization IDs come back in row order."""
        conn.fetch.return_value = [{"organization_id": "o1"}, {"organization_id": "o2"}]
        assert await OrganizationRepository(db_pool).get_ids_for_user("u1") == ["o1", "o2"]


# ============================================================
# NotificationRepository tests
# ============================================================


class TestNotificationRepository:
    """Tests for NotificationRepository.notify_many."""

    async def test_no_items(self, db_pool):
        """Nothing to send, no connection used."""
        assert await NotificationRepository(db_pool).notify_many([]) == 0
        db_pool.acquire.assert_not_called()

    async def test_one_row_per_member(self, db_pool, conn):
        """Every member of every organization is notified in one insert."""
        conn.fetch.return_value = [
            {"organization_id": "o1", "user_id": "u1"},
            {"organization_id": "o1", "user_id": "u2"},
            {"organization_id": "o2", "user_id": "u3"},
        ]
        conn.execute.return_value = "INSERT 0 3"
        items = [
            NotificationItem(organization_id="o1", rental_request_id=7, title="Flat", tenant_name="Jan"),
            NotificationItem(organization_id="o2", rental_request_id=7, title="Flat"),
        ]

        assert await NotificationRepository(db_pool).notify_many(items) == 3
        assert conn.fetch.await_args.args[1] == ["o1", "o2"]
        args = conn.execute.await_args.args
        assert args[1] == NEW_RENTAL_REQUEST
        assert args[2] == ["u1", "u2", "u3"]
        assert args[3] == ["7", "7", "7"]
        assert args[4][0] == "New rental request: Flat"
        assert args[5][2] == "A tenant has a request matching your portfolio."

    async def test_no_members(self, db_pool, conn):
        """Organizations without members produce no insert."""
        items = [NotificationItem(organization_id="o1", rental_request_id=7)]
        assert await NotificationRepository(db_pool).notify_many(items) == 0
        conn.execute.assert_not_awaited()


# ============================================================
# AnalyticsRepository / TrustLevelRepository tests
# ============================================================


class TestAnalyticsRepository:
    """Tests for AnalyticsRepository.upsert."""

    async def test_upsert(self, db_pool, conn):
        """Snapshot fields are written in column order."""
        snapshot = RequestPoolAnalytics(
            location="Poznań",
            date_bucket=datetime(2025, 9, 1, tzinfo=timezone.utc),
            total_requests=4,
            active_requests=2,
            matched_requests=1,
            expired_requests=1,
        )
        await AnalyticsRepository(db_pool).upsert(snapshot)

        call = conn.execute.await_args
        assert call.args[1:] == ("Poznań", snapshot.date_bucket, 4, 2, 1, 1)
        assert "ON CONFLICT (location, date_bucket) DO UPDATE" in sql_of(call)


class TestTrustLevelRepository:
    """Tests for TrustLevelRepository.get_user_trust_level."""

    async def test_trusted(self, db_pool, conn):
        """Accuracy is the share of good move-in reviews."""
        conn.fetchrow.return_value = {
            "review_count": 12,
            "average_rating": Decimal("4.5"),
            "move_in_count": 10,
            "accurate_move_ins": 10,
        }
        result = await TrustLevelRepository(db_pool).get_user_trust_level("u1")

        assert result.level is TrustLevel.TRUSTED
        assert result.metrics.accuracy_percentage == 100.0

    async def test_no_reviews(self, db_pool, conn):
        """Users without reviews are New."""
        conn.fetchrow.return_value = {
            "review_count": 0,
            "average_rating": None,
            "move_in_count": 0,
            "accurate_move_ins": 0,
        }
        result = await TrustLevelRepository(db_pool).get_user_trust_level("u1")
        assert result.level is TrustLevel.NEW
