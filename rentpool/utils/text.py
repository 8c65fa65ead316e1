"""
Text normalization utilities.

Tolerant helpers for free-text locations and loosely formatted money values.
All rental request and property input passes through these before matching.
"""

import math
import re
import unicodedata
from decimal import Decimal
from typing import Any, Optional

MONEY_STRIP_RE = re.compile(r"[^\d,.\-]")


def normalize_ascii(value: Optional[str]) -> str:
    """
    Fold accents by NFD decomposition and dropping combining marks.

    Args:
        value: Any string (or None)

    Returns:
        Accent-free string, '' for falsy input

    Examples:
        >>> normalize_ascii("Poznań")
        'Poznan'
        >>> normalize_ascii("Kraków")
        'Krakow'
        >>> normalize_ascii(None)
        ''
    """
    if not value:
        return ""
    try:
        decomposed = unicodedata.normalize("NFD", value)
        return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    except TypeError:
        return value


def parse_money(value: Any) -> Optional[float]:
    """
    Parse a money value written with either US or EU separators.

    When both '.' and ',' appear, '.' is the thousands separator and ','
    the decimal one. A lone ',' is treated as the decimal separator.

    Args:
        value: Number or string like "2 500 zł", "2.500,50", "3000,5"

    Returns:
        Finite float or None

    Examples:
        >>> parse_money("2.500,50 PLN")
        2500.5
        >>> parse_money("3000,5")
        3000.5
        >>> parse_money("abc")
        None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else None

    text = str(value).strip()
    if not text:
        return None

    cleaned = MONEY_STRIP_RE.sub("", text)
    if "." in cleaned and "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")

    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> Optional[int]:
    """
    Coerce a value to int, None if it is not a finite number.

    Examples:
        >>> as_int("2")
        2
        >>> as_int("two")
        None
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def extract_likely_city(location: Optional[str]) -> Optional[str]:
    """
    Get the city part of a free-text location.

    Args:
        location: Free text like "Warszawa, Mokotów"

    Returns:
        First non-empty comma segment, the whole trimmed string if there is
        none, or None for empty input

    Examples:
        >>> extract_likely_city("Warszawa, Mokotów")
        'Warszawa'
        >>> extract_likely_city("  Gdańsk ")
        'Gdańsk'
    """
    if not location:
        return None
    parts = [part.strip() for part in str(location).split(",") if part.strip()]
    if parts:
        return parts[0]
    return str(location).strip() or None


def location_tokens(location: Optional[str]) -> list[str]:
    """
    Split a location into comma tokens plus their accent-folded variants.

    Examples:
        >>> location_tokens("Poznań, Jeżyce")
        ['Poznań', 'Jeżyce', 'Poznan', 'Jezyce']
    """
    if not location:
        return []
    raw = [part.strip() for part in str(location).split(",") if part.strip()]
    folded = [normalize_ascii(token) for token in raw]
    tokens: list[str] = []
    for token in raw + folded:
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def city_variants(city: Optional[str]) -> list[str]:
    """
    Raw and accent-folded forms of a city name, without duplicates.

    Examples:
        >>> city_variants("Łódź")
        ['Łódź', 'Łodz']
        >>> city_variants("Warszawa")
        ['Warszawa']
    """
    if not city or not city.strip():
        return []
    raw = city.strip()
    folded = normalize_ascii(raw)
    return [raw] if folded == raw else [raw, folded]


def fold(value: Any) -> str:
    """Lowercase and accent-fold any value for loose comparison."""
    if value is None:
        return ""
    return normalize_ascii(str(value).lower())


def round_half_up(value: float) -> int:
    """
    Round to the nearest int, halves away from zero for positive values.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(2.4)
        2
    """
    return int(math.floor(value + 0.5))
