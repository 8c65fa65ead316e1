"""
Unit tests for rentpool/matching/picker.py
"""

from rentpool.matching.picker import pick_best_property, property_fit


class TestPropertyFit:
    """Tests for property_fit function."""

    def test_perfect_fit(self, make_request, make_property):
        """City 30 + range 25 + type 20 + bedrooms 15."""
        assert property_fit(make_property(), make_request()) == 90

    def test_under_min_budget(self, make_request, make_property):
        """Under the range but within the max gives 20."""
        prop = make_property(monthly_rent=1500, property_type=None, bedrooms=None, city=None)
        assert property_fit(prop, make_request()) == 20

    def test_over_max_budget(self, make_request, make_property):
        """Over the max budget gives no budget points."""
        prop = make_property(monthly_rent=3200, property_type=None, bedrooms=None, city=None)
        assert property_fit(prop, make_request()) == 0

    def test_no_max_budget(self, make_request, make_property):
        """Known rent without a max budget gives 10."""
        request = make_request(budget_from=None, budget_to=None)
        prop = make_property(property_type=None, bedrooms=None, city=None)
        assert property_fit(prop, request) == 10


class TestPickBestProperty:
    """Tests for pick_best_property function."""

    def test_empty(self, make_request):
        """No properties, no pick."""
        assert pick_best_property([], make_request()) is None

    def test_highest_fit_wins(self, make_request, make_property):
        """The in-budget property beats the expensive one."""
        expensive = make_property(id="p_expensive", monthly_rent=5000)
        cheap = make_property(id="p_cheap", monthly_rent=2500)
        assert pick_best_property([expensive, cheap], make_request()).id == "p_cheap"

    def test_tie_keeps_first(self, make_request, make_property):
        """Equal fits keep the original order."""
        first = make_property(id="p_first")
        second = make_property(id="p_second")
        assert pick_best_property([first, second], make_request()).id == "p_first"
