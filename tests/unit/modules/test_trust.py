"""
Unit tests for rentpool/modules/trust/models.py
"""

import pytest

from rentpool.modules.trust.models import TrustLevel, classify_landlord_trust


class TestClassifyLandlordTrust:
    """Tests for classify_landlord_trust function."""

    def test_no_reviews(self):
        """No reviews means New."""
        result = classify_landlord_trust(0, 0.0, 0.0)
        assert result.level is TrustLevel.NEW
        assert result.reasons == ["No reviews yet"]

    @pytest.mark.parametrize(
        "reviews,rating,accuracy,issues,expected",
        [
            (25, 4.8, 0.0, 0, TrustLevel.EXCELLENT),
            (25, 4.8, 99.0, 1, TrustLevel.TRUSTED),
            (10, 4.2, 95.0, 0, TrustLevel.TRUSTED),
            (10, 4.1, 95.0, 0, TrustLevel.RELIABLE),
            (3, 2.0, 80.0, 0, TrustLevel.RELIABLE),
            (3, 5.0, 79.9, 0, TrustLevel.NEW),
            (2, 5.0, 100.0, 0, TrustLevel.NEW),
        ],
    )
    def test_levels(self, reviews, rating, accuracy, issues, expected):
        """Boundaries of each level."""
        result = classify_landlord_trust(reviews, rating, accuracy, issues)
        assert result.level is expected

    def test_metrics_kept(self):
        """The figures behind the level are returned."""
        result = classify_landlord_trust(5, 4.0, 90.0)
        assert result.metrics.review_count == 5
        assert result.metrics.accuracy_percentage == 90.0
        assert len(result.reasons) == 2
