"""
Utility modules for the request pool.
"""

from rentpool.utils.dates import as_utc_datetime, day_bucket, utcnow
from rentpool.utils.resilience import best_effort
from rentpool.utils.sql import affected_rows, contains_patterns
from rentpool.utils.text import (
    as_int,
    city_variants,
    extract_likely_city,
    fold,
    location_tokens,
    normalize_ascii,
    parse_money,
    round_half_up,
)

__all__ = [
    # Text
    "normalize_ascii",
    "parse_money",
    "as_int",
    "extract_likely_city",
    "location_tokens",
    "city_variants",
    "fold",
    "round_half_up",
    # Dates
    "utcnow",
    "as_utc_datetime",
    "day_bucket",
    # Resilience
    "best_effort",
    # SQL
    "affected_rows",
    "contains_patterns",
]
