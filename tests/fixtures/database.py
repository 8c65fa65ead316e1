"""
Fake asyncpg pool for repository tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def conn():
    """Connection mock; queries return nothing by default."""
    connection = MagicMock()
    connection.fetch = AsyncMock(return_value=[])
    connection.fetchrow = AsyncMock(return_value=None)
    connection.execute = AsyncMock(return_value="UPDATE 0")
    return connection


@pytest.fixture
def db_pool(conn):
    """Pool mock whose acquire() yields the connection mock."""
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    pool.acquire.return_value.__aexit__.return_value = None
    return pool


def sql_of(mock_call) -> str:
    """Whitespace-collapsed SQL text of a recorded query call."""
    return " ".join(mock_call.args[0].split())
