"""Rental requests module."""

from rentpool.modules.requests.models import (
    PoolStatus,
    RentalRequest,
    RentalRequestCreate,
)
from rentpool.modules.requests.repository import RentalRequestRepository

__all__ = [
    "PoolStatus",
    "RentalRequest",
    "RentalRequestCreate",
    "RentalRequestRepository",
]
