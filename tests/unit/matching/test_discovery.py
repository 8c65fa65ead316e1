"""
Unit tests for rentpool/matching/discovery.py
"""

from datetime import datetime, timezone

import pytest

from rentpool.matching.discovery import group_by_organization
from rentpool.modules.organizations.models import Organization

# Import fixtures
pytest_plugins = ["tests.fixtures.pool"]


# ============================================================
# build_query tests
# ============================================================


class TestBuildQuery:
    """Tests for CandidateDiscovery.build_query."""

    def test_strict_query(self, discovery, make_request):
        """City, rent band and availability come from the request."""
        request = make_request(move_in_date="2025-10-01")
        query = discovery.build_query(request, 1.2)

        assert query.city_patterns == ["%Poznań%", "%Poznan%"]
        assert query.exact_cities == ["Poznań", "Jeżyce", "Poznan", "Jezyce"]
        assert query.max_rent == 3600
        assert query.min_rent == 2000
        assert query.available_before == datetime(2025, 10, 31, tzinfo=timezone.utc)
        assert query.limit == 200

    def test_relaxed_ceiling(self, discovery, make_request):
        """The relaxed query doubles the max budget."""
        assert discovery.build_query(make_request(), 2.0).max_rent == 6000

    def test_no_location(self, discovery, make_request):
        """Empty location means no city filter."""
        query = discovery.build_query(make_request(location=""), 1.2)
        assert query.has_city_filter is False

    def test_no_budget_no_date(self, discovery, make_request):
        """Missing budget and move-in drop those filters."""
        request = make_request(budget_from=None, budget_to=None, move_in_date="soon")
        query = discovery.build_query(request, 1.2)
        assert query.max_rent is None
        assert query.min_rent is None
        assert query.available_before is None


# ============================================================
# find_candidates tests
# ============================================================


class TestFindCandidates:
    """Tests for CandidateDiscovery.find_candidates."""

    async def test_strict_results(self, discovery, property_repo, make_request, make_property):
        """Strict results are used without relaxing."""
        property_repo.find_available.return_value = [make_property()]
        candidates = await discovery.find_candidates(make_request())

        assert len(candidates) == 1
        assert property_repo.find_available.await_count == 1

    async def test_relaxes_when_empty(self, discovery, property_repo, make_request, make_property):
        """An empty strict query is retried with the wider rent ceiling."""
        property_repo.find_available.side_effect = [[], [make_property(monthly_rent=5500)]]
        candidates = await discovery.find_candidates(make_request())

        assert len(candidates) == 1
        assert property_repo.find_available.await_count == 2
        relaxed = property_repo.find_available.await_args_list[1].args[0]
        assert relaxed.max_rent == 6000

    async def test_nothing_found(self, discovery, make_request):
        """No properties, no candidates."""
        assert await discovery.find_candidates(make_request()) == []


# ============================================================
# group_by_organization tests
# ============================================================


class TestGroupByOrganization:
    """Tests for group_by_organization function."""

    def test_first_seen_order(self, make_property):
        """Organizations keep the order they first appear in."""
        other = Organization(id="org_b")
        props = [
            make_property(id="p1"),
            make_property(id="p2", organization_id="org_b", organization=other),
            make_property(id="p3"),
        ]
        groups = group_by_organization(props)

        assert [g.organization_id for g in groups] == ["org_agency", "org_b"]
        assert [p.id for p in groups[0].properties] == ["p1", "p3"]
        assert groups[1].organization == other

    def test_dedupes_properties(self, make_property):
        """The same property is kept once."""
        groups = group_by_organization([make_property(id="p1"), make_property(id="p1")])
        assert len(groups[0].properties) == 1

    @pytest.mark.parametrize("cap", [1, 20])
    def test_caps_properties(self, make_property, cap):
        """Each organization keeps at most `cap` properties."""
        props = [make_property(id=f"p{i}") for i in range(25)]
        groups = group_by_organization(props, max_per_org=cap)
        assert len(groups[0].properties) == cap
        assert groups[0].properties[0].id == "p0"
