"""
Controlador de salud - Estado de la base de datos y del cache de usuarios
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from focusboard.core.dependencies import get_metadata_cache
from focusboard.database import Database
from focusboard.services.user_metadata_cache import UserMetadataCache


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str
    cached_users: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    cache: Annotated[UserMetadataCache, Depends(get_metadata_cache)],
):
    """
    Comprueba que la API responde, si hay conexión a MongoDB y cuántos
    usuarios tiene el cache compartido de leaderboards.
    """
    db_status = "connected" if Database.db is not None else "disconnected"

    return HealthResponse(status="ok", database=db_status, cached_users=len(cache))
