"""
Unit tests for rentpool/pool/reverse.py
"""

from datetime import timedelta

import pytest

from rentpool.modules.properties.models import PropertyStatus
from rentpool.pool.reverse import REVERSE_NOTIFICATION_TITLE

# Import fixtures
pytest_plugins = ["tests.fixtures.pool"]


@pytest.fixture
def listed(property_repo, make_property):
    """A listable property returned by get_by_id."""
    prop = make_property()
    property_repo.get_by_id.return_value = prop
    return prop


class TestGating:
    """Properties that must not be matched."""

    async def test_missing_property(self, reverse_matcher, request_repo):
        """Unknown property IDs match nothing."""
        assert await reverse_matcher.match_requests_for_new_property("nope") == 0
        request_repo.find_for_property.assert_not_awaited()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"status": PropertyStatus.RENTED},
            {"status": PropertyStatus.MAINTENANCE},
            {"availability": False},
        ],
    )
    async def test_not_listable(
        self, reverse_matcher, property_repo, request_repo, match_repo, make_property, overrides
    ):
        """Rented, maintained or hidden properties are skipped."""
        property_repo.get_by_id.return_value = make_property(**overrides)

        assert await reverse_matcher.match_requests_for_new_property("prop_1") == 0
        request_repo.find_for_property.assert_not_awaited()
        match_repo.insert_many.assert_not_awaited()

    async def test_no_city(self, reverse_matcher, property_repo, request_repo, make_property):
        """Properties without a city are skipped."""
        property_repo.get_by_id.return_value = make_property(city=None)
        assert await reverse_matcher.match_requests_for_new_property("prop_1") == 0
        request_repo.find_for_property.assert_not_awaited()


class TestRequestQuery:
    """Arguments of the pooled request lookup."""

    async def test_location_and_budget_filters(self, reverse_matcher, request_repo, listed):
        """City patterns and the rent with its multiplier are both applied."""
        await reverse_matcher.match_requests_for_new_property("prop_1")

        kwargs = request_repo.find_for_property.await_args.kwargs
        assert kwargs["location_patterns"] == ["%Poznań%", "%Poznan%"]
        assert kwargs["rent"] == 2500
        assert kwargs["rent_multiplier"] == 1.2
        assert kwargs["now"] - kwargs["created_after"] == timedelta(days=60)
        assert kwargs["limit"] == 200

    async def test_unknown_rent(self, reverse_matcher, property_repo, request_repo, make_property):
        """Without a rent there is no budget filter."""
        property_repo.get_by_id.return_value = make_property(monthly_rent=None)
        await reverse_matcher.match_requests_for_new_property("prop_1")
        assert request_repo.find_for_property.await_args.kwargs["rent"] is None

    async def test_no_requests(self, reverse_matcher, match_repo, listed):
        """Nothing pooled, nothing inserted."""
        assert await reverse_matcher.match_requests_for_new_property("prop_1") == 0
        match_repo.insert_many.assert_not_awaited()


class TestReverseMatches:
    """Match rows and notifications."""

    async def test_anchored_to_property(
        self, reverse_matcher, request_repo, match_repo, listed, make_request
    ):
        """Every match points at the new property and its organization."""
        request_repo.find_for_property.return_value = [make_request(id=1), make_request(id=2)]

        assert await reverse_matcher.match_requests_for_new_property("prop_1") == 2
        rows = match_repo.insert_many.await_args.args[0]
        assert [r.key for r in rows] == [
            ("org_agency", 1, "prop_1"),
            ("org_agency", 2, "prop_1"),
        ]
        assert rows[0].match_score == 79

    async def test_below_threshold_skipped(
        self, reverse_matcher, request_repo, match_repo, listed, make_request
    ):
        """Poorly fitting requests get no match."""
        poor = make_request(
            id=3, location="Kraków", budget_to=1000, budget_from=None,
            property_type="house", bedrooms=5,
        )
        request_repo.find_for_property.return_value = [poor, make_request(id=1)]

        assert await reverse_matcher.match_requests_for_new_property("prop_1") == 1
        rows = match_repo.insert_many.await_args.args[0]
        assert [r.rental_request_id for r in rows] == [1]

    async def test_reputation_fetched_once(
        self, reverse_matcher, request_repo, organization_repo, listed, make_request
    ):
        """Organization reputation is computed once per property."""
        request_repo.find_for_property.return_value = [make_request(id=i) for i in range(1, 4)]
        await reverse_matcher.match_requests_for_new_property("prop_1")
        organization_repo.get_members.assert_awaited_once_with("org_agency")

    async def test_notification(self, reverse_matcher, request_repo, notifier, listed, make_request):
        """Organizations are told about the request with a tenant fallback."""
        request_repo.find_for_property.return_value = [
            make_request(id=1),
            make_request(id=2, tenant_name=None),
        ]
        await reverse_matcher.match_requests_for_new_property("prop_1")

        items = notifier.await_args.args[0]
        assert {i.notification_title for i in items} == {REVERSE_NOTIFICATION_TITLE}
        assert [i.rental_request_id for i in items] == [1, 2]
        assert [i.tenant_name for i in items] == ["Jan Kowalski", "Tenant"]

    async def test_errors_propagate(self, reverse_matcher, request_repo, listed):
        """Repository errors reach the caller."""
        request_repo.find_for_property.side_effect = RuntimeError("db gone")
        with pytest.raises(RuntimeError):
            await reverse_matcher.match_requests_for_new_property("prop_1")
