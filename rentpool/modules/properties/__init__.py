"""Properties module."""

from rentpool.modules.properties.models import (
    Property,
    PropertyCreate,
    PropertyQuery,
    PropertyStatus,
)
from rentpool.modules.properties.repository import PropertyRepository

__all__ = [
    "Property",
    "PropertyCreate",
    "PropertyQuery",
    "PropertyStatus",
    "PropertyRepository",
]
