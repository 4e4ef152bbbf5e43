"""
Dependencies de FastAPI para inyectar la BD y el servicio de leaderboards
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from focusboard.core.config import Settings, get_settings
from focusboard.database import get_database
from focusboard.services.leaderboard_service import LeaderboardService
from focusboard.services.user_metadata_cache import UserMetadataCache


@lru_cache()
def get_metadata_cache() -> UserMetadataCache:
    """
    Cache de usuarios compartido por todas las variantes de leaderboard

    Una sola instancia por proceso (no una por request).
    """
    return UserMetadataCache()


async def get_leaderboard_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
    cache: Annotated[UserMetadataCache, Depends(get_metadata_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LeaderboardService:
    return LeaderboardService.from_database(db, cache=cache, settings=settings)


# Alias de tipo para que se vea mas limpio en los endpoints
Leaderboards = Annotated[LeaderboardService, Depends(get_leaderboard_service)]
