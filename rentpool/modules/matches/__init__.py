"""Matches module."""

from rentpool.modules.matches.models import (
    InboxItem,
    InboxPage,
    LandlordRequestMatch,
    MatchCreate,
    MatchStatus,
    Pagination,
)
from rentpool.modules.matches.repository import MatchRepository

__all__ = [
    "InboxItem",
    "InboxPage",
    "LandlordRequestMatch",
    "MatchCreate",
    "MatchStatus",
    "Pagination",
    "MatchRepository",
]
