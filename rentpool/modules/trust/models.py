"""
Trust Level Models.

Landlord trust classification from published reviews.
"""

from enum import Enum

from pydantic import BaseModel, Field


class TrustLevel(str, Enum):
    """Landlord trust tier."""

    NEW = "New"
    RELIABLE = "Reliable"
    TRUSTED = "Trusted"
    EXCELLENT = "Excellent"


class TrustMetrics(BaseModel):
    """Review figures behind a trust level."""

    review_count: int = 0
    average_rating: float = 0.0
    accuracy_percentage: float = Field(
        default=0.0, description="Share of move-in reviews rated 4 or more"
    )
    unresolved_issues: int = 0


class TrustLevelResult(BaseModel):
    """Trust level with human readable reasons."""

    level: TrustLevel
    reasons: list[str] = Field(default_factory=list)
    metrics: TrustMetrics = Field(default_factory=TrustMetrics)


def classify_landlord_trust(
    review_count: int,
    average_rating: float,
    accuracy_percentage: float,
    unresolved_issues: int = 0,
) -> TrustLevelResult:
    """
    Classify a landlord from review statistics.

    Args:
        review_count: Published end-of-lease reviews
        average_rating: Average rating of those reviews
        accuracy_percentage: Share (0-100) of move-in reviews rated >= 4
        unresolved_issues: Open disputes

    Returns:
        TrustLevelResult

    Examples:
        >>> classify_landlord_trust(0, 0, 0).level.value
        'New'
        >>> classify_landlord_trust(30, 4.9, 50).level.value
        'Excellent'
        >>> classify_landlord_trust(5, 3.0, 85).level.value
        'Reliable'
    """
    if review_count == 0:
        return TrustLevelResult(level=TrustLevel.NEW, reasons=["No reviews yet"])

    metrics = TrustMetrics(
        review_count=review_count,
        average_rating=average_rating,
        accuracy_percentage=accuracy_percentage,
        unresolved_issues=unresolved_issues,
    )

    if review_count >= 25 and average_rating >= 4.8 and unresolved_issues == 0:
        return TrustLevelResult(
            level=TrustLevel.EXCELLENT,
            reasons=[
                f"High review count ({review_count})",
                f"Excellent average rating ({average_rating:.1f})",
                "No unresolved issues",
            ],
            metrics=metrics,
        )

    if review_count >= 10 and accuracy_percentage >= 95 and average_rating >= 4.2:
        return TrustLevelResult(
            level=TrustLevel.TRUSTED,
            reasons=[
                f"Good review count ({review_count})",
                f"Excellent accuracy rate ({accuracy_percentage:.1f}%)",
                f"High average rating ({average_rating:.1f})",
            ],
            metrics=metrics,
        )

    if review_count >= 3 and accuracy_percentage >= 80:
        return TrustLevelResult(
            level=TrustLevel.RELIABLE,
            reasons=[
                f"Minimum review count met ({review_count})",
                f"Good accuracy rate ({accuracy_percentage:.1f}%)",
            ],
            metrics=metrics,
        )

    return TrustLevelResult(
        level=TrustLevel.NEW,
        reasons=[
            f"Insufficient reviews ({review_count}/3)",
            f"Accuracy rate below threshold ({accuracy_percentage:.1f}%/80%)",
        ],
        metrics=metrics,
    )
