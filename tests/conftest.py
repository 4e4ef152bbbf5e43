"""
Pytest fixtures and configuration for all tests.
"""

from typing import AsyncGenerator

import pytest
from mongomock_motor import AsyncMongoMockClient
from motor.motor_asyncio import AsyncIOMotorDatabase

from factories import NOW, FakeSessionStore, FakeUserDirectory
from focusboard.core.config import Settings
from focusboard.services.geo_scope import METERS_PER_MILE
from focusboard.services.leaderboard_service import LeaderboardService
from focusboard.services.user_metadata_cache import UserMetadataCache

TEST_DB_NAME = "focusboard_test"


@pytest.fixture
def settings() -> Settings:
    """Settings with the production leaderboard defaults."""
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        leaderboard_cap=10,
        regional_radius_meters=15 * METERS_PER_MILE,
        week_timezone="UTC",
    )


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def user_directory() -> FakeUserDirectory:
    return FakeUserDirectory()


@pytest.fixture
def metadata_cache() -> UserMetadataCache:
    return UserMetadataCache()


@pytest.fixture
def leaderboard_service(session_store, user_directory, metadata_cache, settings, clock):
    """LeaderboardService wired to the in-memory store and directory."""
    return LeaderboardService(
        session_store,
        user_directory,
        cache=metadata_cache,
        settings=settings,
        clock=clock,
    )


@pytest.fixture
async def test_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean in-memory Mongo database for each test.
    """
    client = AsyncMongoMockClient()
    db = client[TEST_DB_NAME]

    yield db

    for collection_name in await db.list_collection_names():
        await db[collection_name].drop()
