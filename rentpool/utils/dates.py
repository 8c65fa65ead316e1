"""
Date helpers.

Every timestamp handled by the pool is a timezone-aware UTC datetime.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a date-like value to an aware UTC datetime.

    Args:
        value: datetime, date, ISO string ("2025-09-10", "2025-09-10T00:00:00Z")
            or None

    Returns:
        Aware datetime, or None when missing or unparseable

    Examples:
        >>> as_utc_datetime("2025-09-10")
        datetime.datetime(2025, 9, 10, 0, 0, tzinfo=datetime.timezone.utc)
        >>> as_utc_datetime("not a date")
        None
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def day_bucket(moment: Optional[datetime] = None) -> datetime:
    """Truncate a moment (default now) to UTC midnight."""
    moment = moment or utcnow()
    return moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
