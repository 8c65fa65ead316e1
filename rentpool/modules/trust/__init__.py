"""Trust levels module."""

from rentpool.modules.trust.models import (
    TrustLevel,
    TrustLevelResult,
    TrustMetrics,
    classify_landlord_trust,
)
from rentpool.modules.trust.repository import TrustLevelRepository

__all__ = [
    "TrustLevel",
    "TrustLevelResult",
    "TrustMetrics",
    "classify_landlord_trust",
    "TrustLevelRepository",
]
