"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from focusboard.core.dependencies import get_leaderboard_service, get_metadata_cache
from focusboard.main import app


@pytest.fixture
async def client(leaderboard_service, metadata_cache):
    """
    HTTP client for testing API endpoints.

    Overrides the leaderboard service with one wired to the in-memory
    session store and user directory.
    """
    app.dependency_overrides[get_leaderboard_service] = lambda: leaderboard_service
    app.dependency_overrides[get_metadata_cache] = lambda: metadata_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
