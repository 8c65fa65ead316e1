"""
SQL helpers shared by the repositories.
"""


def affected_rows(status: str) -> int:
    """
    Get the row count from an asyncpg command status.

    Examples:
        >>> affected_rows("UPDATE 3")
        3
        >>> affected_rows("INSERT 0 2")
        2
    """
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


def contains_patterns(values: list[str]) -> list[str]:
    """
    Build ILIKE patterns matching any value as a substring.

    LIKE wildcards inside the values are escaped.

    Examples:
        >>> contains_patterns(["Warszawa", "Poznan"])
        ['%Warszawa%', '%Poznan%']
    """
    patterns = []
    for value in values:
        escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        patterns.append(f"%{escaped}%")
    return patterns
